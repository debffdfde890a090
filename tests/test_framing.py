from elisp_bridge.framing import JOINER, export_stdin, read_stdin
from elisp_bridge.printer import stringify
from elisp_bridge.types import atom, list_


def test_joiner_is_backslash_n_not_a_newline():
    assert JOINER == "\\n"
    assert len(JOINER) == 2
    assert "\n" not in JOINER


def test_read_stdin_program():
    program = read_stdin(list_(atom("princ"), atom("content")))
    assert stringify(program) == (
        r"""(let ((elisp-bridge--chunks nil) (elisp-bridge--line nil))"""
        r""" (while (setq elisp-bridge--line (ignore-errors (read-string "")))"""
        r""" (push (concat "\n" elisp-bridge--line) elisp-bridge--chunks))"""
        r""" (let ((content (mapconcat 'identity (nreverse elisp-bridge--chunks) "")))"""
        r""" (princ content)))"""
    )


def test_read_stdin_custom_variable():
    program = read_stdin(list_(atom("insert"), atom("doc")), var=atom("doc"))
    out = stringify(program)
    assert "(let ((doc (mapconcat " in out
    assert out.endswith("(insert doc)))")


def test_read_stdin_without_body():
    out = stringify(read_stdin())
    assert out.endswith(r"""(let ((content (mapconcat 'identity (nreverse elisp-bridge--chunks) "")))))""")


def test_export_stdin_program():
    out = stringify(export_stdin("org-svelte-export-as-svelte"))
    assert out.startswith("(let ((elisp-bridge--chunks nil)")
    assert out.endswith(
        "(with-temp-buffer (org-mode) (insert content)"
        " (org-svelte-export-as-svelte) (princ (buffer-string)))))"
    )


def test_export_stdin_mode():
    out = stringify(export_stdin(atom("org-md-export-as-markdown"), mode=atom("text-mode")))
    assert "(with-temp-buffer (text-mode) (insert content) (org-md-export-as-markdown)" in out
