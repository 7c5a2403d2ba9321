"""
payment-schedule: Validation and reconciliation of contract payment schedules.
"""

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

# Editing
from payment_schedule.editor import (
    add_default_term,
    allocate_share,
    delete_term,
    edit_term,
    move_term,
    renumber_terms,
)

# Status lifecycle
from payment_schedule.lifecycle import (
    apply_status_updates,
    load_status_rows,
    summarize_payments,
    transition_status,
)

# Built-in profiles
from payment_schedule.profiles import BuiltinProfiles
from payment_schedule.results.types import (
    DeleteResult,
    ImportRowError,
    PaymentSummary,
    StatusImportReport,
    TransitionResult,
    UpdatedPayment,
    ValidationResult,
)
from payment_schedule.schemas import (
    ContractContext,
    PaymentStatus,
    PaymentTerm,
    ValidationMode,
    amount_from_percentage,
    coerce_term,
    coerce_terms,
    is_contract_document,
    percentage_from_amount,
)
from payment_schedule.utils import (
    calculate_percentage,
    has_duplicate_dates,
    is_date_after,
    is_valid_date,
    validate_min_date_gap,
)

# Validation
from payment_schedule.validation import (
    ScheduleRule,
    ScheduleValidator,
    ValidationReporter,
    validate_contract_info,
    validate_schedule,
    validate_single_term,
    validate_term_form,
)

__version__ = "0.1.0"

__all__ = [
    # Core
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
    # Built-in Profiles
    "BuiltinProfiles",
    # Schemas
    "PaymentTerm",
    "PaymentStatus",
    "ContractContext",
    "ValidationMode",
    "coerce_term",
    "coerce_terms",
    "percentage_from_amount",
    "amount_from_percentage",
    "is_contract_document",
    # Utilities
    "is_valid_date",
    "is_date_after",
    "calculate_percentage",
    "has_duplicate_dates",
    "validate_min_date_gap",
    # Results
    "ValidationResult",
    "DeleteResult",
    "TransitionResult",
    "StatusImportReport",
    "ImportRowError",
    "UpdatedPayment",
    "PaymentSummary",
    # Validation
    "ScheduleValidator",
    "ScheduleRule",
    "validate_schedule",
    "validate_single_term",
    "validate_term_form",
    "validate_contract_info",
    "ValidationReporter",
    # Editing
    "add_default_term",
    "allocate_share",
    "edit_term",
    "delete_term",
    "move_term",
    "renumber_terms",
    # Status Lifecycle
    "transition_status",
    "apply_status_updates",
    "load_status_rows",
    "summarize_payments",
]
