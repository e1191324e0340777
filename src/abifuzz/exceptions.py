from typing import Any, Optional


class AbiFuzzError(Exception):
    pass


class ConfigError(AbiFuzzError):
    pass


class _PathError(AbiFuzzError):
    """Error raised at a specific node of a value tree."""

    def __init__(self, message: str, path: str = "", type_key: Optional[Any] = None):
        self.path = path
        self.type_key = type_key
        self.reason = message
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)


class ShapeMismatchError(_PathError):
    pass


class DecodeError(_PathError):
    pass


class MalformedHexError(DecodeError):
    pass


class LengthMismatchError(DecodeError):
    pass


class IntegerOutOfRangeError(DecodeError):
    pass


class ArityMismatchError(DecodeError):
    pass


class UnknownTypeKindError(DecodeError):
    pass


class InvalidValueError(DecodeError):
    pass
