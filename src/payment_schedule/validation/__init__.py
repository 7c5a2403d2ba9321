"""Validation of payment schedules and contract information.

This module provides the schedule validator and its rule chain, the
single-term and edit-form checks used during live editing, the general
contract-info validator and reporters for rendering results.
"""

from payment_schedule.validation.contract_info import validate_contract_info
from payment_schedule.validation.reporters import ValidationReporter
from payment_schedule.validation.rules import (
    AdvancePaymentRule,
    DueDateRule,
    FinalPaymentRule,
    PercentageSumRule,
    ReconciliationRule,
    RuleOutcome,
    ScheduleRule,
    ScheduleSnapshot,
    TermRule,
    VolumeRule,
    get_default_rules,
    term_errors,
)
from payment_schedule.validation.validator import (
    ScheduleValidator,
    validate_schedule,
    validate_single_term,
    validate_term_form,
)

__all__ = [
    # Validator
    "ScheduleValidator",
    "validate_schedule",
    "validate_single_term",
    "validate_term_form",
    "validate_contract_info",
    # Rules
    "ScheduleRule",
    "ScheduleSnapshot",
    "RuleOutcome",
    "ReconciliationRule",
    "PercentageSumRule",
    "AdvancePaymentRule",
    "FinalPaymentRule",
    "DueDateRule",
    "VolumeRule",
    "TermRule",
    "get_default_rules",
    "term_errors",
    # Reporting
    "ValidationReporter",
]
