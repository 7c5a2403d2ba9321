"""Data models for payment schedules.

This module provides the typed shapes every other component works on:
the payment term, the contract context and the coercion boundary that
turns loosely typed input into them.
"""

from payment_schedule.schemas.contract import ContractContext, ValidationMode
from payment_schedule.schemas.term import (
    PaymentStatus,
    PaymentTerm,
    amount_from_percentage,
    coerce_status,
    coerce_term,
    coerce_terms,
    is_contract_document,
    percentage_from_amount,
    term_fields,
)

__all__ = [
    # Term
    "PaymentTerm",
    "PaymentStatus",
    "coerce_term",
    "coerce_terms",
    "coerce_status",
    "percentage_from_amount",
    "amount_from_percentage",
    "is_contract_document",
    "term_fields",
    # Contract
    "ContractContext",
    "ValidationMode",
]
