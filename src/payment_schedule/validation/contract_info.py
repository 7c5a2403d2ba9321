"""Validation of the general contract information form."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date
from typing import Any

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.results.types import ValidationResult
from payment_schedule.schemas.contract import ValidationMode
from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.numeric import format_amount, to_decimal

logger = logging.getLogger(__name__)


def validate_contract_info(
    contract_code: Any,
    contract_amount: Any,
    start_date: Any,
    end_date: Any,
    sign_date: Any = None,
    is_code_unique: Callable[[str], bool] | None = None,
    mode: ValidationMode = ValidationMode.CREATE,
    config: RuleConfig | None = None,
    messages: ValidationMessages | None = None,
) -> ValidationResult:
    """Validate the code, value and dates of a contract.

    Shares ``RuleConfig.contract`` with the schedule validator so that one
    configuration object drives the whole contract form.

    Args:
        contract_code: Code as entered, expected to match the configured pattern.
        contract_amount: Contract value as entered.
        start_date: Effective date.
        end_date: Expiry date.
        sign_date: Signing date; the start may not precede it.
        is_code_unique: Lookup answering whether a code is still free. Only
            consulted in create mode and for well-formed codes.
        mode: Whether the contract is new or being edited.
        config: Rule thresholds. Uses defaults if not provided.
        messages: Message catalogue. Uses defaults if not provided.

    Returns:
        ValidationResult whose total_amount is the parsed contract value.

    Example:
        ```python
        result = validate_contract_info(
            "CTR001-2025",
            150_000_000,
            "2025-01-01",
            "2025-12-31",
            sign_date="2024-12-20",
            is_code_unique=lambda code: code not in existing_codes,
        )
        ```
    """
    config = config or RuleConfig()
    messages = messages or ValidationMessages()
    rules = config.contract
    errors: list[str] = []
    warnings: list[str] = []

    code = contract_code.strip() if isinstance(contract_code, str) else ""
    if not code:
        errors.append(messages.contract_code_required)
    elif not re.fullmatch(rules.code_pattern, code):
        errors.append(messages.format("contract_code_format", pattern=rules.code_pattern))
    elif mode is ValidationMode.CREATE and is_code_unique is not None:
        if not is_code_unique(code):
            errors.append(messages.contract_code_exists)

    amount = to_decimal(contract_amount)
    if amount < rules.min_amount:
        errors.append(
            messages.format("contract_amount_min", minimum=format_amount(rules.min_amount))
        )
    elif amount > config.high_value_threshold:
        warnings.append(messages.high_value_contract)

    start = _required_date(start_date, messages.start_date_required, messages, errors)
    end = _required_date(end_date, messages.end_date_required, messages, errors)

    if start is not None and end is not None:
        if end <= start:
            errors.append(messages.end_date_after_start)
        else:
            duration = (end - start).days
            if duration < rules.min_duration_days:
                errors.append(
                    messages.format("date_range_too_short", days=rules.min_duration_days)
                )
            elif duration > rules.max_duration_days:
                warnings.append(
                    messages.format("date_range_too_long", days=rules.max_duration_days)
                )

    signed = parse_date(sign_date)
    if signed is not None and start is not None and signed > start:
        errors.append(messages.start_date_after_sign)

    logger.debug(
        "Validated contract info %r: %d errors, %d warnings", code, len(errors), len(warnings)
    )
    return ValidationResult(errors=errors, warnings=warnings, total_amount=amount)


def _required_date(
    value: Any,
    missing_message: str,
    messages: ValidationMessages,
    errors: list[str],
) -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(missing_message)
        return None
    parsed = parse_date(value)
    if parsed is None:
        errors.append(messages.invalid_date)
    return parsed
