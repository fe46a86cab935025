# lead_econ/errors.py
from __future__ import annotations


class InputValidationError(ValueError):
    """
    Raised by the input collector for malformed or out-of-domain answers.
    `field` names the offending input so callers can show the message next to it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PreconditionError(ArithmeticError):
    """A zero divisor reached an engine despite collector checks."""


class LVRPreconditionError(PreconditionError, ZeroDivisionError):
    def __init__(self, message: str = "Last month's leads and day of month cannot be zero.") -> None:
        super().__init__(message)
        self.message = message
