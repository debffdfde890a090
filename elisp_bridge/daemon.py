"""
Evaluate forms in a dedicated Emacs daemon.

An :class:`EmacsDaemon` owns one ``emacs --fg-daemon`` process, listening on
a socket named after the instance, with a private init directory so that
neither the user's configuration nor another instance leaks into it. Every
call to :meth:`EmacsDaemon.evaluate` runs a separate ``emacsclient --eval``
process against that socket and returns what the client printed on stdout.

Clients run concurrently. Emacs itself is shared, so forms that change
global state (``setq`` of a customization variable, say) from two
concurrent calls race with each other; order such calls yourself.

Nothing here times out. A daemon that never prints its ready message, or a
form that never returns, blocks the awaiting coroutine until it is
cancelled.

Typical use::

    async with EmacsDaemon() as emacs:
        html = await (
            emacs.require("ox-html")
            .progn(export_stdin("org-html-export-as-html"))
            .stdin(document)
            .run()
        )
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import shlex
import shutil
import tempfile
import uuid
from asyncio.subprocess import DEVNULL, PIPE
from enum import Enum
from pathlib import Path
from typing import Sequence

from elisp_bridge import SExpression
from elisp_bridge.config import (
    CHANNEL_PREFIX,
    ENCODING,
    READY_MARKER,
    get_emacs_command,
    get_emacsclient_command,
    get_tmp_root,
)
from elisp_bridge.errors import (
    AbnormalExit,
    ElispBridgeError,
    NotStarted,
    SpawnError,
)
from elisp_bridge.forms import progn, require
from elisp_bridge.printer import stringify
from elisp_bridge.types.symbol import Atom

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096


class DaemonState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


class EmacsDaemon:
    """
    Handle on one Emacs daemon.

    The handle is bound to the event loop that first starts it; use it from
    that loop only.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        emacs: Sequence[str] | None = None,
        emacsclient: Sequence[str] | None = None,
        tmp_root: str | os.PathLike | None = None,
        ready_marker: str = READY_MARKER,
    ):
        self.name: str = name or f"{CHANNEL_PREFIX}-{os.getpid()}-{uuid.uuid4().hex[:8]}"
        self.emacs: list[str] = list(emacs) if emacs is not None else get_emacs_command()
        self.emacsclient: list[str] = (
            list(emacsclient) if emacsclient is not None else get_emacsclient_command()
        )
        self.tmp_root: Path = Path(tmp_root) if tmp_root is not None else get_tmp_root()
        self.ready_marker: str = ready_marker
        self.init_directory: Path | None = None

        self._state = DaemonState.IDLE
        self._process: asyncio.subprocess.Process | None = None
        self._starting: asyncio.Task | None = None
        self._tasks: list[asyncio.Task] = []

    def __repr__(self) -> str:
        return f"<EmacsDaemon {self.name} {self._state.value}>"

    @property
    def state(self) -> DaemonState:
        return self._state

    async def __aenter__(self) -> EmacsDaemon:
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # ----------------- Lifecycle -----------------
    async def startup(self) -> None:
        """Start the daemon and wait until it accepts clients.

        Returns at once if the daemon is already running. Concurrent callers
        during startup all wait on the same process. A stopped daemon is
        started again on the same socket name and init directory.
        """
        if self._state is DaemonState.RUNNING:
            return
        if self._starting is None:
            self._starting = asyncio.ensure_future(self._start())
        starting = self._starting
        try:
            await asyncio.shield(starting)
        finally:
            if starting.done() and self._starting is starting:
                self._starting = None

    async def _start(self) -> None:
        self._state = DaemonState.STARTING
        if self.init_directory is None:
            try:
                self.tmp_root.mkdir(parents=True, exist_ok=True)
                self.init_directory = Path(
                    tempfile.mkdtemp(prefix=f"{CHANNEL_PREFIX}-", dir=self.tmp_root)
                )
            except OSError as exc:
                self._state = DaemonState.STOPPED
                raise SpawnError(
                    f"Cannot create an init directory under {str(self.tmp_root)!r}: {exc}"
                ) from exc

        args = [
            *self.emacs,
            f"--fg-daemon={self.name}",
            f"--init-directory={self.init_directory}",
        ]
        logger.info("Starting Emacs daemon %s: %s", self.name, shlex.join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                *args, stdin=DEVNULL, stdout=DEVNULL, stderr=PIPE
            )
        except OSError as exc:
            self._state = DaemonState.STOPPED
            raise SpawnError(f"Cannot start Emacs daemon {args[0]!r}: {exc}") from exc

        self._process = process
        decoder = codecs.getincrementaldecoder(ENCODING)(errors="replace")
        try:
            rest = await self._wait_until_ready(process, decoder)
        except BaseException:
            self._process = None
            self._state = DaemonState.STOPPED
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        self._state = DaemonState.RUNNING
        logger.info("Emacs daemon %s is ready (pid %s)", self.name, process.pid)
        self._tasks = [
            asyncio.ensure_future(self._forward_diagnostics(process, decoder, rest)),
            asyncio.ensure_future(self._watch_exit(process)),
        ]

    async def _wait_until_ready(self, process: asyncio.subprocess.Process, decoder) -> str:
        """Read stderr until the ready marker; return what followed it."""
        # The marker may be split across reads, so keep enough of the tail
        # of what was seen to match it on the next read.
        keep = len(self.ready_marker) - 1
        seen = ""
        while True:
            chunk = await process.stderr.read(_CHUNK_SIZE)
            if not chunk:
                returncode = await process.wait()
                raise AbnormalExit(
                    returncode,
                    f"Emacs daemon {self.name} exited with code {returncode} before it was ready",
                )
            text = decoder.decode(chunk)
            logger.debug("Emacs daemon %s: %s", self.name, text.rstrip())
            seen += text
            if self.ready_marker in seen:
                return seen.split(self.ready_marker, 1)[1]
            seen = seen[-keep:] if keep else ""

    async def _forward_diagnostics(
        self, process: asyncio.subprocess.Process, decoder, pending: str = ""
    ) -> None:
        # A line may straddle two reads; hold back the unterminated tail
        # until the rest of it arrives.
        buffered = pending
        while True:
            lines = buffered.splitlines(keepends=True)
            buffered = ""
            if lines and not lines[-1].endswith(("\n", "\r")):
                buffered = lines.pop()
            for line in lines:
                self._log_diagnostic(line)
            chunk = await process.stderr.read(_CHUNK_SIZE)
            if not chunk:
                self._log_diagnostic(buffered + decoder.decode(b"", final=True))
                return
            buffered += decoder.decode(chunk)

    def _log_diagnostic(self, line: str) -> None:
        if line.strip():
            logger.warning("Emacs daemon %s: %s", self.name, line.rstrip("\r\n"))

    async def _watch_exit(self, process: asyncio.subprocess.Process) -> None:
        returncode = await process.wait()
        if self._process is process:
            self._process = None
            self._state = DaemonState.STOPPED
            logger.warning("Emacs daemon %s exited with code %s", self.name, returncode)

    async def shutdown(self) -> None:
        """Terminate the daemon if it is running; otherwise do nothing.

        The init directory is kept; see :meth:`remove_init_directory`.
        """
        if self._state is not DaemonState.RUNNING:
            return
        process = self._process
        self._process = None
        self._state = DaemonState.STOPPED
        logger.info("Stopping Emacs daemon %s", self.name)
        if process is not None and process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass  # already gone
            await process.wait()

        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def remove_init_directory(self) -> None:
        if self._state in (DaemonState.STARTING, DaemonState.RUNNING):
            raise ElispBridgeError(
                f"Cannot remove the init directory of running Emacs daemon {self.name}"
            )
        if self.init_directory is not None:
            shutil.rmtree(self.init_directory)
            self.init_directory = None

    # ----------------- Evaluation -----------------
    async def evaluate(self, sexp: SExpression, input: str | None = None) -> str:
        """Evaluate ``sexp`` with emacsclient and return its standard output.

        ``input``, if given, is written to the client's standard input; use
        it (with :func:`elisp_bridge.framing.read_stdin`) for payloads too
        large for a command-line argument. Anything the client writes to
        stderr is logged and does not fail the call.
        """
        if self._state is not DaemonState.RUNNING:
            raise NotStarted(
                f"Emacs daemon {self.name} is not started. Call startup() first."
            )

        code = stringify(sexp)
        args = [*self.emacsclient, f"--socket-name={self.name}", "--eval", code]
        logger.debug("Evaluating on %s: %s", self.name, code)
        try:
            client = await asyncio.create_subprocess_exec(
                *args,
                stdin=DEVNULL if input is None else PIPE,
                stdout=PIPE,
                stderr=PIPE,
            )
        except OSError as exc:
            raise SpawnError(f"Cannot start emacsclient {args[0]!r}: {exc}") from exc

        try:
            stdout, stderr = await client.communicate(
                None if input is None else input.encode(ENCODING)
            )
        except BaseException:
            if client.returncode is None:
                client.kill()
                await client.wait()
            raise
        if stderr.strip():
            logger.warning(
                "Emacs Lisp evaluation error: %s",
                stderr.decode(ENCODING, errors="replace").rstrip(),
            )
        return stdout.decode(ENCODING, errors="replace")

    # ----------------- Request building -----------------
    def require(self, feature: str | Atom, filename: str | None = None) -> Request:
        return Request(self).require(feature, filename)

    def progn(self, *forms: SExpression) -> Request:
        return Request(self).progn(*forms)

    def stdin(self, text: str) -> Request:
        return Request(self).stdin(text)


class Request:
    """
    A batch of forms to evaluate together in one emacsclient call.

    Requests are immutable; each builder method returns a new request, so a
    common prefix can be shared::

        base = emacs.require("org")
        await base.progn(form_a).run()
        await base.progn(form_b).run()
    """

    __slots__ = ("daemon", "forms", "input")

    def __init__(
        self,
        daemon: EmacsDaemon,
        forms: tuple[SExpression, ...] = (),
        input: str | None = None,
    ):
        self.daemon = daemon
        self.forms = forms
        self.input = input

    def __repr__(self) -> str:
        return f"<Request {stringify(self.sexp)}>"

    def require(self, feature: str | Atom, filename: str | None = None) -> Request:
        return Request(self.daemon, (*self.forms, require(feature, filename)), self.input)

    def progn(self, *forms: SExpression) -> Request:
        return Request(self.daemon, (*self.forms, *forms), self.input)

    def stdin(self, text: str) -> Request:
        return Request(self.daemon, self.forms, text)

    @property
    def sexp(self) -> SExpression:
        return progn(*self.forms)

    async def run(self) -> str:
        return await self.daemon.evaluate(self.sexp, self.input)
