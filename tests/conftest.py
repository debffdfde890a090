import sys
from pathlib import Path

import pytest

from elisp_bridge.daemon import EmacsDaemon

# Every daemon test talks to tests/fake_emacs.py instead of a real Emacs,
# started with the interpreter running the tests. Extra flags for the fake
# daemon or client are appended after the script path.
FAKE_EMACS = str(Path(__file__).with_name("fake_emacs.py"))


@pytest.fixture
def make_daemon(tmp_path):
    """Factory for daemons backed by the fake Emacs, rooted in tmp_path."""

    def _make(daemon_flags=(), client_flags=(), **kwargs):
        kwargs.setdefault("tmp_root", tmp_path)
        return EmacsDaemon(
            emacs=[sys.executable, FAKE_EMACS, *daemon_flags],
            emacsclient=[sys.executable, FAKE_EMACS, *client_flags],
            **kwargs,
        )

    return _make
