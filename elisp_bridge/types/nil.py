from __future__ import annotations


class NilType:
    """The empty list, which is also false in Emacs Lisp."""

    __slots__ = ()
    _instance: NilType | None = None

    def __new__(cls) -> NilType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "Nil"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)

    def __reduce__(self):
        return (NilType, ())


Nil = NilType()


def is_nil(x) -> bool:
    """True for Nil and for Python's None, which is read as nil everywhere."""
    return x is None or isinstance(x, NilType)
