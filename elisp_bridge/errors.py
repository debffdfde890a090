from __future__ import annotations

class ElispBridgeError(Exception):
    """ Base class for all elisp_bridge errors"""
    pass

class InvalidNameError(ElispBridgeError, ValueError):
    """ Raised when an atom or keyword name would break the printed form"""
    pass

class SerializationTypeError(ElispBridgeError, TypeError):
    """ Raised when a value has no Emacs Lisp printed representation"""

class NotStarted(ElispBridgeError):
    """ Raised when evaluating before the daemon is running"""

class SpawnError(ElispBridgeError):
    """ Raised when the Emacs daemon or emacsclient process cannot be created"""

class AbnormalExit(ElispBridgeError):
    """ Raised when the Emacs daemon exits before it is ready"""

    def __init__(self, returncode: int | None, message: str | None = None):
        super().__init__(message or f"Emacs daemon exited with code {returncode}")
        self.returncode = returncode
