"""Configuration classes for schedule validation."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class FieldRules(BaseModel):
    """Field-level constraints for a single payment term form."""

    model_config = ConfigDict(frozen=True)

    description_min_length: int = Field(
        default=3,
        ge=0,
        description="Minimum length of a term description",
    )
    description_max_length: int = Field(
        default=100,
        ge=1,
        description="Maximum length of a term description",
    )
    notes_max_length: int = Field(
        default=200,
        ge=0,
        description="Maximum length of term notes",
    )


class AttachmentPolicy(BaseModel):
    """Contract-document policy shared with the attachments collaborator."""

    model_config = ConfigDict(frozen=True)

    require_contract_file: bool = Field(
        default=False,
        description="Whether at least one contract document must remain on the contract",
    )
    min_required_files: int = Field(
        default=0,
        ge=0,
        description="Minimum number of attached files",
    )
    preferred_contract_format: str = Field(
        default="pdf",
        description="Canonical file extension of a contract document",
    )
    contract_document_types: tuple[str, ...] = Field(
        default=("contract",),
        description="Document type tags that mark a contract document",
    )


class ContractRules(BaseModel):
    """Rules for the general contract information form."""

    model_config = ConfigDict(frozen=True)

    code_pattern: str = Field(
        default=r"^CTR\d{3}-\d{4}$",
        description="Regular expression a contract code must match",
    )
    min_amount: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Minimum contract value",
    )
    min_duration_days: int = Field(
        default=7,
        ge=0,
        description="Shortest recommended contract duration",
    )
    max_duration_days: int = Field(
        default=1095,
        ge=1,
        description="Longest recommended contract duration (3 years)",
    )


class RuleConfig(BaseModel):
    """Business-rule thresholds for payment schedules.

    The same engine is parameterized per deployment by passing a different
    instance; nothing reads module-level state.

    Example:
        ```python
        from decimal import Decimal
        from payment_schedule import RuleConfig, validate_schedule

        config = RuleConfig(total_amount_tolerance_percent=Decimal("0.5"))
        result = validate_schedule(context, terms, config=config)
        ```
    """

    model_config = ConfigDict(frozen=True)

    # Reconciliation
    total_amount_tolerance_percent: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        le=100,
        description="Allowed slack between schedule sum and contract amount, in percent",
    )
    percentage_sum_tolerance: Decimal = Field(
        default=Decimal("0.1"),
        ge=0,
        description="Allowed distance of the summed shares from 100, in percentage points",
    )

    # Share policy
    advance_payment_max_percentage: Decimal = Field(
        default=Decimal("70"),
        ge=0,
        le=100,
        description="Ceiling on the first term's share",
    )
    final_payment_min_percentage: Decimal = Field(
        default=Decimal("10"),
        ge=0,
        le=100,
        description="Share below which the last term triggers a warning",
    )
    min_payment_percentage: Decimal = Field(
        default=Decimal("5"),
        ge=0,
        le=100,
        description="Share below which any term is an error",
    )
    min_term_amount: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Absolute floor on a single term's amount",
    )
    advance_keywords: tuple[str, ...] = Field(
        default=("tạm ứng", "advance", "initial"),
        description="Description keywords that mark the first term as an advance payment",
    )

    # Dates
    min_due_date_gap_days: int = Field(
        default=7,
        ge=0,
        description="Minimum spacing between consecutive due dates",
    )

    # Volume
    high_value_threshold: Decimal = Field(
        default=Decimal("500000000"),
        ge=0,
        description="Contract amount above which more terms are expected",
    )
    min_terms_for_high_value: int = Field(
        default=3,
        ge=0,
        description="Minimum term count for high-value contracts",
    )
    max_payment_terms: int = Field(
        default=10,
        ge=1,
        description="Term count above which a warning is raised",
    )

    # Defaults for newly added terms
    default_term_percentage: Decimal = Field(
        default=Decimal("10"),
        gt=0,
        le=100,
        description="Share given to a newly added term",
    )
    default_due_days: int = Field(
        default=30,
        ge=0,
        description="Days after max(today, contract start) for a new term's due date",
    )

    fields: FieldRules = Field(default_factory=FieldRules)
    attachments: AttachmentPolicy = Field(default_factory=AttachmentPolicy)
    contract: ContractRules = Field(default_factory=ContractRules)
