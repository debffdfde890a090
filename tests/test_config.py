from pathlib import Path
import tempfile

from elisp_bridge import config
from elisp_bridge.daemon import EmacsDaemon


def test_defaults(monkeypatch):
    for var in ("ELISP_BRIDGE_EMACS", "ELISP_BRIDGE_EMACSCLIENT", "ELISP_BRIDGE_TMPDIR"):
        monkeypatch.delenv(var, raising=False)
    assert config.get_emacs_command() == ["emacs"]
    assert config.get_emacsclient_command() == ["emacsclient"]
    assert config.get_tmp_root() == Path(tempfile.gettempdir())


def test_commands_are_shell_split(monkeypatch):
    monkeypatch.setenv("ELISP_BRIDGE_EMACS", "/opt/emacs/bin/emacs -Q")
    monkeypatch.setenv("ELISP_BRIDGE_EMACSCLIENT", "'/Applications/Emacs App/emacsclient'")
    assert config.get_emacs_command() == ["/opt/emacs/bin/emacs", "-Q"]
    assert config.get_emacsclient_command() == ["/Applications/Emacs App/emacsclient"]


def test_blank_command_falls_back(monkeypatch):
    monkeypatch.setenv("ELISP_BRIDGE_EMACS", "   ")
    assert config.get_emacs_command() == ["emacs"]


def test_tmp_root(monkeypatch, tmp_path):
    monkeypatch.setenv("ELISP_BRIDGE_TMPDIR", str(tmp_path))
    assert config.get_tmp_root() == tmp_path


def test_daemon_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ELISP_BRIDGE_EMACS", "emacs-29")
    monkeypatch.setenv("ELISP_BRIDGE_TMPDIR", str(tmp_path))
    emacs = EmacsDaemon()
    assert emacs.emacs == ["emacs-29"]
    assert emacs.tmp_root == tmp_path
    assert emacs.ready_marker == config.READY_MARKER


def test_explicit_arguments_win(monkeypatch, tmp_path):
    monkeypatch.setenv("ELISP_BRIDGE_EMACS", "emacs-29")
    emacs = EmacsDaemon(emacs=["my-emacs"], name="docs", tmp_root=tmp_path)
    assert emacs.emacs == ["my-emacs"]
    assert emacs.name == "docs"
