"""
Error taxonomy for pivot expressions.

Every error is fatal to the one expression (or definition set) being
processed. Nothing here is recovered internally; the caller decides
whether to abort a build or skip an entry.
"""

from typing import Optional


class PivotsError(Exception):
    """Base class for all pivot expression errors."""
    pass


class ParseError(PivotsError):
    """Raised when expression text is malformed."""

    def __init__(self, message: str, expression: str = "", position: Optional[int] = None):
        self.message = message
        self.expression = expression
        self.position = position
        if position is not None:
            message = f"{message} at position {position} in '{expression}'"
        elif expression:
            message = f"{message} in '{expression}'"
        super().__init__(message)


class UnresolvedChoice(PivotsError, LookupError):
    """Raised when a token matches no choice name or alias of any pivot."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unmatched configuration choice '{token}'")


class UnknownPivot(PivotsError, KeyError):
    """Raised when a pivot name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown pivot '{name}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class RegistryError(PivotsError):
    """Raised when pivot definitions are inconsistent."""
    pass


class ConfigError(PivotsError):
    """Raised when a pivot configuration document is malformed."""
    pass
