"""Stand-in for ``emacs --fg-daemon`` and ``emacsclient`` used by the daemon tests.

Daemon mode (``--fg-daemon=NAME --init-directory=DIR``):
    --fail            print an error and exit with code 3
    --quiet-exit      exit with code 0 without announcing readiness
    --chatty          print a warning line once ready
    --exit-after=SEC  exit with code 1 some time after becoming ready
    --split-diagnostic  once ready, write one long warning line in two pieces
Otherwise announce readiness (split over two writes) and sleep until killed.

Client mode (``--socket-name=NAME --eval CODE``):
    --noisy           also write to stderr
    --hang            sleep before doing anything
Print a JSON object with the socket name, the code and whatever arrived on
stdin, written in several pieces to give concurrent clients a chance to
interleave if their pipes were shared.
"""

import json
import os
import sys
import time


def _option(args, prefix):
    for arg in args:
        if arg.startswith(prefix):
            return arg[len(prefix):]
    return None


def daemon(args):
    init_dir = _option(args, "--init-directory=")
    with open(os.path.join(init_dir, "fake-daemon.pid"), "w") as f:
        f.write(str(os.getpid()))

    if "--fail" in args:
        sys.stderr.write("Error: cannot load init file\n")
        sys.stderr.flush()
        sys.exit(3)
    if "--quiet-exit" in args:
        sys.exit(0)

    sys.stderr.write("Loading...\nStarting Emacs ")
    sys.stderr.flush()
    time.sleep(0.05)
    sys.stderr.write("daemon.\n")
    sys.stderr.flush()

    if "--chatty" in args:
        sys.stderr.write("Warning: fake diagnostic from daemon\n")
        sys.stderr.flush()

    if "--split-diagnostic" in args:
        sys.stderr.write("Warning: " + "x" * 6000)
        sys.stderr.flush()
        time.sleep(0.2)
        sys.stderr.write("y" * 10 + " end of warning\n")
        sys.stderr.flush()

    exit_after = _option(args, "--exit-after=")
    if exit_after is not None:
        time.sleep(float(exit_after))
        sys.exit(1)

    while True:
        time.sleep(3600)


def client(args):
    if "--hang" in args:
        time.sleep(60)
    code = args[args.index("--eval") + 1]
    data = sys.stdin.read() if not sys.stdin.isatty() else ""
    if "--noisy" in args:
        sys.stderr.write("*ERROR*: fake evaluation error\n")
        sys.stderr.flush()

    out = json.dumps({
        "socket": _option(args, "--socket-name="),
        "eval": code,
        "stdin": data,
    })
    step = max(1, len(out) // 4)
    for i in range(0, len(out), step):
        sys.stdout.write(out[i:i + step])
        sys.stdout.flush()
        time.sleep(0.01)


if __name__ == "__main__":
    argv = sys.argv[1:]
    if _option(argv, "--fg-daemon=") is not None:
        daemon(argv)
    else:
        client(argv)
