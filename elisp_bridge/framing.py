"""Programs that rebuild a payload streamed to emacsclient's standard input.

Command-line arguments are limited in length, and a document pasted into an
``--eval`` argument would also have to survive the Lisp reader. Instead the
document is written to the client's stdin and read back inside Emacs one
line at a time by the loop built here::

    (let ((elisp-bridge--chunks nil) (elisp-bridge--line nil))
      (while (setq elisp-bridge--line (ignore-errors (read-string "")))
        (push (concat "\\n" elisp-bridge--line) elisp-bridge--chunks))
      (let ((content (mapconcat 'identity (nreverse elisp-bridge--chunks) "")))
        BODY...))

``read-string`` signals an error at end of input; ``ignore-errors`` turns
that into nil, which ends the ``while``. Chunks are collected in a list and
joined once, so reading is linear in the size of the payload.

Every line is prefixed with :data:`JOINER`, including the first one.
"""

from __future__ import annotations

from elisp_bridge import SExpression
from elisp_bridge.types.cell import list_
from elisp_bridge.types.nil import Nil
from elisp_bridge.types.quote import quote
from elisp_bridge.types.symbol import Atom, atom

# Backslash and "n", printed verbatim into a string literal. The Emacs
# reader turns that escape into a newline when it reads the program.
JOINER = "\\n"

_CHUNKS = atom("elisp-bridge--chunks")
_LINE = atom("elisp-bridge--line")


def read_stdin(*body: SExpression, var: Atom = atom("content")) -> SExpression:
    """Bind ``var`` to everything on standard input, then evaluate ``body``."""
    read_line = list_(atom("ignore-errors"), list_(atom("read-string"), ""))
    loop = list_(
        atom("while"),
        list_(atom("setq"), _LINE, read_line),
        list_(atom("push"), list_(atom("concat"), JOINER, _LINE), _CHUNKS),
    )
    joined = list_(
        atom("mapconcat"),
        quote(atom("identity")),
        list_(atom("nreverse"), _CHUNKS),
        "",
    )
    return list_(
        atom("let"),
        list_(list_(_CHUNKS, Nil), list_(_LINE, Nil)),
        loop,
        list_(atom("let"), list_(list_(var, joined)), *body),
    )


def export_stdin(
    export_command: str | Atom,
    mode: str | Atom = "org-mode",
) -> SExpression:
    """Read a document from stdin, export it and print the result.

    The document is inserted into a temporary buffer in ``mode``, then
    ``export_command`` is called with no arguments in that buffer and the
    buffer's contents are written to standard output with ``princ``.
    """
    if not isinstance(export_command, Atom):
        export_command = atom(export_command)
    if not isinstance(mode, Atom):
        mode = atom(mode)
    content = atom("content")
    return read_stdin(
        list_(
            atom("with-temp-buffer"),
            list_(mode),
            list_(atom("insert"), content),
            list_(export_command),
            list_(atom("princ"), list_(atom("buffer-string"))),
        ),
        var=content,
    )
