"""Atoms and keywords: the named values of an Emacs Lisp form.

Both are printed verbatim, so their names are checked on construction.
A name that would end the symbol early (whitespace, brackets, quotes, the
comment and reader-macro characters) or that reads as something other than
a symbol (a lone ``.``) is rejected with :class:`InvalidNameError`.
Callers that build names from outside text should expect that error at
this boundary instead of a malformed expression later.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from elisp_bridge.errors import InvalidNameError

# Characters that terminate or re-interpret a symbol in the Emacs Lisp reader.
_FORBIDDEN = re.compile(r"[\s()\[\]\"';`,#\\]")


def _check_name(kind: str, name: str) -> None:
    if not isinstance(name, str):
        raise InvalidNameError(f"{kind} name must be a str, got {type(name).__name__}")
    if not name:
        raise InvalidNameError(f"{kind} name must not be empty")
    if name == ".":
        raise InvalidNameError(f"{kind} name must not be a lone '.'")
    bad = _FORBIDDEN.search(name)
    if bad:
        raise InvalidNameError(f"{kind} name {name!r} contains {bad.group()!r}")


@dataclass(frozen=True)
class Atom:
    """A symbol, printed as its bare name."""

    name: str

    def __post_init__(self):
        _check_name("Atom", self.name)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Keyword:
    """A self-evaluating symbol, printed with a leading colon."""

    name: str

    def __post_init__(self):
        _check_name("Keyword", self.name)
        if self.name.startswith(":"):
            raise InvalidNameError(f"Keyword name {self.name!r} already starts with ':'")

    def __str__(self):
        return f":{self.name}"


def atom(name: str) -> Atom:
    return Atom(name)


def keyword(name: str) -> Keyword:
    return Keyword(name)
