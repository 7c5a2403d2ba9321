"""Built-in rule profiles.

Provides ready-made configurations for common deployments.
"""

from decimal import Decimal

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.profiles import ProfileRegistry, RuleProfile


class BuiltinProfiles:
    """Factory class for built-in rule profiles.

    Example:
        ```python
        from payment_schedule import BuiltinProfiles, validate_schedule

        profile = BuiltinProfiles.strict()
        result = validate_schedule(
            context, terms, config=profile.rules, messages=profile.messages()
        )
        ```
    """

    @staticmethod
    def default() -> RuleProfile:
        """Create the standard commercial profile.

        Returns:
            RuleProfile with the library default thresholds.
        """
        return RuleProfile(
            name="default",
            description="Standard thresholds for commercial service contracts",
            rules=RuleConfig(),
            tags=["commercial", "default"],
        )

    @staticmethod
    def strict() -> RuleProfile:
        """Create a profile for tightly controlled contracts.

        Schedules must reconcile to the contract amount exactly, advances are
        capped at 30% and due dates must be two weeks apart.

        Returns:
            RuleProfile with the strict thresholds.
        """
        return RuleProfile(
            name="strict",
            description="Exact reconciliation and conservative advances, e.g. public tenders",
            rules=RuleConfig(
                total_amount_tolerance_percent=Decimal("0"),
                advance_payment_max_percentage=Decimal("30"),
                min_due_date_gap_days=14,
            ),
            tags=["public_sector", "strict"],
        )

    @classmethod
    def get_all(cls) -> dict[str, RuleProfile]:
        """Get all built-in profiles.

        Returns:
            Dictionary mapping profile names to RuleProfile instances.
        """
        return {
            "default": cls.default(),
            "strict": cls.strict(),
        }

    @classmethod
    def create_registry(cls) -> ProfileRegistry:
        """Create a registry pre-populated with all built-in profiles.

        Returns:
            ProfileRegistry with all built-in profiles registered.

        Example:
            ```python
            registry = BuiltinProfiles.create_registry()
            registry.register(
                RuleProfile(
                    name="tenant_a",
                    parent_profile="strict",
                    rules=RuleConfig(max_payment_terms=6),
                )
            )
            ```
        """
        registry = ProfileRegistry()
        for profile in cls.get_all().values():
            registry.register(profile)
        return registry
