"""Custom exceptions for payment-schedule.

Validation outcomes are never raised: they are returned as result objects.
The exceptions below cover misconfiguration and programming errors only.
"""

from typing import Any


class PaymentScheduleError(Exception):
    """Base exception for all payment-schedule errors."""

    pass


class ConfigurationError(PaymentScheduleError):
    """Raised when rule configuration or message overrides are invalid."""

    pass


class ProfileValidationError(PaymentScheduleError):
    """Raised when a rule profile has contradictory thresholds."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class InvalidContractAmountError(PaymentScheduleError, ValueError):
    """Raised when a contract amount is negative.

    Upstream validation should make this impossible, so reaching it
    indicates a caller bug rather than bad user input.
    """

    def __init__(self, contract_amount: Any) -> None:
        super().__init__(f"Contract amount must not be negative, got {contract_amount}")
        self.contract_amount = contract_amount


class TermIndexError(PaymentScheduleError, IndexError):
    """Raised when an editor operation targets a position outside the list."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Term index {index} out of range for schedule of {size} terms")
        self.index = index
        self.size = size
