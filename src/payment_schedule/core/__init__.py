"""Core configuration, messages and errors."""

from payment_schedule.core.config import (
    AttachmentPolicy,
    ContractRules,
    FieldRules,
    RuleConfig,
)
from payment_schedule.core.exceptions import (
    ConfigurationError,
    InvalidContractAmountError,
    PaymentScheduleError,
    ProfileValidationError,
    TermIndexError,
)
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.core.profiles import ProfileRegistry, RuleProfile

__all__ = [
    "RuleConfig",
    "FieldRules",
    "AttachmentPolicy",
    "ContractRules",
    "ValidationMessages",
    "RuleProfile",
    "ProfileRegistry",
    "PaymentScheduleError",
    "ConfigurationError",
    "ProfileValidationError",
    "InvalidContractAmountError",
    "TermIndexError",
]
