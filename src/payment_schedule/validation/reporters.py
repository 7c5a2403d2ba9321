"""Validation reporters for rendering results in various formats."""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from payment_schedule.results.types import ValidationResult
from payment_schedule.schemas.contract import ContractContext
from payment_schedule.schemas.term import PaymentTerm, coerce_term
from payment_schedule.utils.numeric import (
    calculate_percentage,
    format_amount,
    format_percentage,
)


class ValidationReporter:
    """Render a validation result for review outside the editor.

    Supports text, JSON, and Markdown output formats.

    Example:
        ```python
        result = validate_schedule(context, terms)

        reporter = ValidationReporter(result, context=context, terms=terms)
        reporter.save("schedule-review.md")  # Auto-detects format from extension

        # Or get report as string
        print(reporter.to_text())
        ```
    """

    def __init__(
        self,
        result: ValidationResult,
        context: ContractContext | None = None,
        terms: Sequence[Any] | None = None,
        title: str = "Payment Schedule Validation Report",
    ) -> None:
        """Initialize the reporter.

        Args:
            result: The validation result to render.
            context: Contract facts, shown in the summary when given.
            terms: The validated schedule, listed when given.
            title: Title for the report.
        """
        self.result = result
        self.context = context
        self.title = title

        contract_amount = context.contract_amount if context else None
        self.terms: list[PaymentTerm] = [coerce_term(t, contract_amount) for t in terms or ()]

    @property
    def status(self) -> str:
        if not self.result.is_valid:
            return "INVALID"
        if self.result.has_warnings:
            return "VALID WITH WARNINGS"
        return "VALID"

    def _share(self, term: PaymentTerm) -> str:
        if self.context is None or self.context.contract_amount <= 0:
            return "-"
        return format_percentage(calculate_percentage(term.amount, self.context.contract_amount))

    def _difference(self) -> Any:
        if self.context is None:
            return None
        return self.context.contract_amount - self.result.total_amount

    def to_text(self, include_terms: bool = True) -> str:
        """Generate a plain text report.

        Args:
            include_terms: Whether to list the schedule.

        Returns:
            Plain text report string.
        """
        lines = [
            "=" * 70,
            f"  {self.title}",
            "=" * 70,
            f"  Generated: {datetime.now().isoformat()}",
            "",
            "-" * 70,
            "  SUMMARY",
            "-" * 70,
            f"  Status:               {self.status}",
            f"  Errors:               {len(self.result.errors)}",
            f"  Warnings:             {len(self.result.warnings)}",
            f"  Scheduled Total:      {format_amount(self.result.total_amount)}",
        ]

        if self.context is not None:
            lines.extend([
                f"  Contract Amount:      {format_amount(self.context.contract_amount)}",
                f"  Difference:           {format_amount(self._difference())}",
                f"  Mode:                 {self.context.mode.value}",
            ])

        if self.result.errors:
            lines.extend(["", "-" * 70, "  ERRORS", "-" * 70])
            lines.extend(f"  ✗ {message}" for message in self.result.errors)

        if self.result.warnings:
            lines.extend(["", "-" * 70, "  WARNINGS", "-" * 70])
            lines.extend(f"  ! {message}" for message in self.result.warnings)

        if include_terms and self.terms:
            lines.extend(["", "-" * 70, "  SCHEDULE", "-" * 70])
            for term in self.terms:
                lines.append(
                    f"  #{term.term_number:<3} {term.due_date or '-':10}  "
                    f"{format_amount(term.amount):>18}  {self._share(term):>6}%  "
                    f"{term.status.value:8}  {term.description}"
                )

        lines.extend(["", "=" * 70])
        return "\n".join(lines)

    def to_json(self) -> dict[str, Any]:
        """Generate a JSON-serializable report dictionary.

        Returns:
            Dictionary suitable for JSON serialization.
        """
        report: dict[str, Any] = {
            "title": self.title,
            "generated": datetime.now().isoformat(),
            "status": self.status,
            "summary": {
                "is_valid": self.result.is_valid,
                "error_count": len(self.result.errors),
                "warning_count": len(self.result.warnings),
            },
            "result": self.result.model_dump(mode="json"),
        }

        if self.context is not None:
            report["contract"] = self.context.model_dump(mode="json")
            report["summary"]["difference"] = format_amount(self._difference())

        if self.terms:
            report["terms"] = [term.model_dump(mode="json", by_alias=True) for term in self.terms]

        return report

    def to_markdown(self, include_terms: bool = True) -> str:
        """Generate a Markdown report.

        Args:
            include_terms: Whether to list the schedule.

        Returns:
            Markdown formatted report string.
        """
        lines = [
            f"# {self.title}",
            "",
            f"*Generated: {datetime.now().isoformat()}*",
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Status | {self.status} |",
            f"| Errors | {len(self.result.errors)} |",
            f"| Warnings | {len(self.result.warnings)} |",
            f"| Scheduled Total | {format_amount(self.result.total_amount)} |",
        ]

        if self.context is not None:
            lines.extend([
                f"| Contract Amount | {format_amount(self.context.contract_amount)} |",
                f"| Difference | {format_amount(self._difference())} |",
            ])

        if self.result.errors:
            lines.extend(["", "## Errors", ""])
            lines.extend(f"- ❌ {message}" for message in self.result.errors)

        if self.result.warnings:
            lines.extend(["", "## Warnings", ""])
            lines.extend(f"- ⚠️ {message}" for message in self.result.warnings)

        if include_terms and self.terms:
            lines.extend([
                "",
                "## Schedule",
                "",
                "| # | Description | Due Date | Amount | Share | Status |",
                "|---|-------------|----------|-------:|------:|--------|",
            ])
            for term in self.terms:
                lines.append(
                    f"| {term.term_number} | {term.description} | {term.due_date} | "
                    f"{format_amount(term.amount)} | {self._share(term)}% | {term.status.value} |"
                )

        lines.append("")
        return "\n".join(lines)

    def save(
        self,
        path: str | Path,
        format: str = "auto",
        include_terms: bool = True,
    ) -> None:
        """Save the report to a file.

        Args:
            path: Output file path.
            format: Output format ("text", "json", "markdown", or "auto").
                   "auto" detects from file extension.
            include_terms: Whether to list the schedule.
        """
        path = Path(path)

        if format == "auto":
            suffix = path.suffix.lower()
            if suffix == ".json":
                format = "json"
            elif suffix in (".md", ".markdown"):
                format = "markdown"
            else:
                format = "text"

        if format == "json":
            content = json.dumps(self.to_json(), indent=2, ensure_ascii=False, default=str)
        elif format == "markdown":
            content = self.to_markdown(include_terms=include_terms)
        else:
            content = self.to_text(include_terms=include_terms)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
