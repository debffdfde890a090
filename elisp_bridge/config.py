from __future__ import annotations
import os
import shlex
import tempfile
from pathlib import Path
from typing import List

# Emacs prints this on stderr once a --fg-daemon server is accepting
# clients. There is no structured handshake, so if a future Emacs rewords
# the message, startup will wait forever.
READY_MARKER = "Starting Emacs daemon."

CHANNEL_PREFIX = "elisp-bridge"
ENCODING = "utf-8"

# Defaults
_DEFAULT_EMACS = "emacs"
_DEFAULT_EMACSCLIENT = "emacsclient"


def command_from_env(var: str, default: str) -> List[str]:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        raw = default
    return shlex.split(raw)


def get_emacs_command() -> List[str]:
    return command_from_env('ELISP_BRIDGE_EMACS', _DEFAULT_EMACS)


def get_emacsclient_command() -> List[str]:
    return command_from_env('ELISP_BRIDGE_EMACSCLIENT', _DEFAULT_EMACSCLIENT)


def get_tmp_root() -> Path:
    raw = os.environ.get('ELISP_BRIDGE_TMPDIR')
    return Path(raw) if raw else Path(tempfile.gettempdir())
