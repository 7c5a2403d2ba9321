"""User-visible validation messages.

Every message is a ``str.format`` template so that wording can be replaced
per deployment without touching the rules that emit it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from payment_schedule.core.exceptions import ConfigurationError


class ValidationMessages(BaseModel):
    """Catalogue of message templates used by validators and editors.

    Example:
        ```python
        messages = ValidationMessages().customize(
            no_payment_terms="Add at least one installment before saving",
        )
        result = validate_schedule(context, terms, messages=messages)
        ```
    """

    model_config = ConfigDict(frozen=True)

    # Common
    invalid_date: str = "Invalid date"

    # Single term
    term_prefix: str = "Term {term_number}: {message}"
    term_description_required: str = "Please enter a description for the payment term"
    term_description_too_short: str = "Description must be at least {minimum} characters"
    term_description_too_long: str = "Description must be at most {maximum} characters"
    term_due_date_required: str = "Please select a due date"
    term_amount_required: str = "Please enter an amount"
    term_amount_positive: str = "Amount must be greater than 0"
    term_amount_min: str = "Amount must be at least {minimum}"
    term_notes_too_long: str = "Notes must be at most {maximum} characters"
    term_due_date_past: str = "Due date should not be in the past"
    term_before_start_date: str = "Due date should not be before the contract start date"
    term_after_end_date: str = "Due date should not be after the contract end date"
    term_advance_percentage: str = (
        "Advance payment should not exceed {maximum}% of the contract value"
    )
    term_small_percentage: str = (
        "Payment term is too small ({percentage}% < {minimum}% of the contract value)"
    )
    term_duplicate_date: str = "Another payment term is already due on this date"
    term_gap_too_small: str = "Due dates should be at least {days} days apart"
    term_final_percentage_low: str = (
        "The final payment should be at least {minimum}% of the contract value"
    )

    # Whole schedule
    no_payment_terms: str = "The contract must have at least one payment term"
    total_exceeds_contract: str = "Total of payment terms exceeds the contract value"
    total_less_than_contract: str = (
        "Total of payment terms is {difference} less than the contract value"
    )
    percentage_sum_not_100: str = (
        "Payment terms currently add up to {total}% and should add up to 100%"
    )
    first_term_not_advance: str = "The first payment term should be an advance/initial payment"
    too_many_terms: str = (
        "There are many payment terms (>{maximum}), the schedule may be hard to manage"
    )
    too_few_terms_high_value: str = (
        "High-value contracts (>{threshold}) should have at least {minimum} payment terms"
    )

    # Status lifecycle
    unknown_status: str = "Unknown payment status '{status}'"
    paid_date_required: str = "Please select the payment date"
    paid_date_invalid: str = "Payment date is not a valid date"
    paid_amount_positive: str = "Paid amount must be greater than 0"
    term_not_found: str = "No payment term matches '{reference}'"

    # Editor
    default_term_description: str = "Installment {number}"
    cant_delete_last_contract: str = (
        "Cannot delete the last contract document. "
        "The contract needs at least one contract file"
    )

    # General contract information
    contract_code_required: str = "Contract code is required"
    contract_code_format: str = "Contract code must match the format {pattern}"
    contract_code_exists: str = "Contract code already exists"
    contract_amount_min: str = "Contract value must be at least {minimum}"
    start_date_required: str = "Please select the start date"
    end_date_required: str = "Please select the end date"
    end_date_after_start: str = "End date must be after the start date"
    start_date_after_sign: str = "Start date must be on or after the signing date"
    date_range_too_long: str = "Contract duration should not exceed {days} days"
    date_range_too_short: str = "Contract duration is too short, it should be at least {days} days"
    high_value_contract: str = "This is a high-value contract, please double-check its details"

    def format(self, key: str, **values: Any) -> str:
        """Render the template stored under ``key``."""
        template: str = getattr(self, key)
        return template.format(**values)

    def for_term(self, term_number: int, message: str) -> str:
        """Prefix a message with the term it concerns."""
        return self.format("term_prefix", term_number=term_number, message=message)

    def customize(self, **overrides: str) -> ValidationMessages:
        """Return a copy with some templates replaced.

        Raises:
            ConfigurationError: If a key is unknown or a value is not a string.
        """
        unknown = sorted(set(overrides) - set(type(self).model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown message keys: {', '.join(unknown)}")
        for key, value in overrides.items():
            if not isinstance(value, str):
                raise ConfigurationError(f"Message '{key}' must be a string")
        return self.model_copy(update=overrides)
