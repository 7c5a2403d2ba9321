"""Rule profiles for reusable, versioned deployment configurations.

This module provides:
- RuleProfile: A named, versioned RuleConfig with message overrides and serialization
- ProfileRegistry: Registry for managing and discovering profiles

For the shipped profiles, see payment_schedule.profiles.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.exceptions import ProfileValidationError
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.utils.io import read_source


class RuleProfile(BaseModel):
    """A reusable set of business rules for one deployment or tenant.

    Profiles bundle thresholds with message wording and can be stored as
    JSON or YAML next to the deployment that uses them.

    Supports:
    - Serialization to/from JSON and YAML
    - Profile inheritance via parent_profile
    - Consistency checks between thresholds

    Example:
        ```python
        profile = RuleProfile(
            name="public_sector",
            rules=RuleConfig(advance_payment_max_percentage=Decimal("30")),
            message_overrides={"term_due_date_past": "Due date is in the past"},
        )
        profile.to_yaml("profiles/public_sector.yaml")

        loaded = RuleProfile.from_yaml("profiles/public_sector.yaml")
        result = validate_schedule(ctx, terms, config=loaded.rules, messages=loaded.messages())
        ```
    """

    name: str = Field(description="Profile name for identification")
    version: str = Field(default="1.0", description="Profile version for change tracking")
    description: str | None = Field(
        default=None,
        description="Human-readable description of where this profile applies",
    )
    rules: RuleConfig = Field(default_factory=RuleConfig)
    message_overrides: dict[str, str] | None = Field(
        default=None,
        description="Replacement message templates keyed by message name",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Tags for categorizing and searching profiles",
    )
    parent_profile: str | None = Field(
        default=None,
        description="Name of parent profile to inherit from",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate profile name is non-empty and normalize it."""
        if not v or not v.strip():
            raise ValueError("Profile name cannot be empty")
        return v.strip().lower().replace(" ", "_")

    def validate_profile(self) -> list[str]:
        """Check the profile for contradictions.

        Returns:
            List of warnings (empty if the profile is clean).

        Raises:
            ProfileValidationError: If thresholds contradict each other.
        """
        rules = self.rules
        problems: list[str] = []

        if rules.min_payment_percentage > rules.advance_payment_max_percentage:
            problems.append(
                "min_payment_percentage is above advance_payment_max_percentage"
            )
        if rules.min_terms_for_high_value > rules.max_payment_terms:
            problems.append("min_terms_for_high_value is above max_payment_terms")
        if rules.contract.min_duration_days > rules.contract.max_duration_days:
            problems.append("contract.min_duration_days is above contract.max_duration_days")
        if rules.fields.description_min_length > rules.fields.description_max_length:
            problems.append(
                "fields.description_min_length is above fields.description_max_length"
            )

        if problems:
            raise ProfileValidationError(
                f"Profile '{self.name}' has contradictory rules", details=problems
            )

        warnings: list[str] = []
        if self.message_overrides:
            known = set(ValidationMessages.model_fields)
            for key in self.message_overrides:
                if key not in known:
                    warnings.append(f"Message override '{key}' does not match any message")
        return warnings

    def messages(self) -> ValidationMessages:
        """Build the message catalogue with this profile's overrides applied."""
        known = set(ValidationMessages.model_fields)
        overrides = {
            key: value
            for key, value in (self.message_overrides or {}).items()
            if key in known
        }
        return ValidationMessages().customize(**overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert profile to a plain dictionary.

        Only rule fields that were set explicitly are written, so a stored
        profile keeps inheriting library defaults.
        """
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
        }
        if self.description:
            data["description"] = self.description
        rules = self.rules.model_dump(mode="json", exclude_unset=True)
        if rules:
            data["rules"] = rules
        if self.message_overrides:
            data["message_overrides"] = self.message_overrides
        if self.tags:
            data["tags"] = self.tags
        if self.parent_profile:
            data["parent_profile"] = self.parent_profile
        return data

    def to_json(self, path: str | Path | None = None, indent: int = 2) -> str:
        """Serialize profile to JSON, optionally writing it to ``path``."""
        json_str = json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

        if path:
            Path(path).write_text(json_str, encoding="utf-8")

        return json_str

    def to_yaml(self, path: str | Path | None = None) -> str:
        """Serialize profile to YAML, optionally writing it to ``path``."""
        yaml_str: str = yaml.dump(
            self.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True
        )

        if path:
            Path(path).write_text(yaml_str, encoding="utf-8")

        return yaml_str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuleProfile:
        """Create profile from dictionary."""
        return cls(
            name=data.get("name", "unnamed"),
            version=str(data.get("version", "1.0")),
            description=data.get("description"),
            rules=RuleConfig.model_validate(data.get("rules") or {}),
            message_overrides=data.get("message_overrides"),
            tags=data.get("tags"),
            parent_profile=data.get("parent_profile"),
        )

    @classmethod
    def from_json(cls, source: str | Path) -> RuleProfile:
        """Load profile from a JSON file or string."""
        data = json.loads(read_source(source))
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, source: str | Path) -> RuleProfile:
        """Load profile from a YAML file or string."""
        data = yaml.safe_load(read_source(source))
        return cls.from_dict(data)

    def merge_with_parent(self, parent: RuleProfile) -> RuleProfile:
        """Merge this profile with a parent profile.

        Rule fields set on the child override the parent's; message
        overrides are merged with the child taking precedence.
        """
        child_rules = {
            name: getattr(self.rules, name) for name in self.rules.model_fields_set
        }
        merged_rules = parent.rules.model_copy(update=child_rules)
        merged_messages = {**(parent.message_overrides or {}), **(self.message_overrides or {})}
        merged_tags = sorted(set((parent.tags or []) + (self.tags or [])))

        return RuleProfile(
            name=self.name,
            version=self.version,
            description=self.description or parent.description,
            rules=merged_rules,
            message_overrides=merged_messages if merged_messages else None,
            tags=merged_tags if merged_tags else None,
            parent_profile=parent.name,
        )


class ProfileRegistry:
    """Registry for managing rule profiles.

    Example:
        ```python
        registry = ProfileRegistry()
        registry.register(BuiltinProfiles.default())
        registry.register(RuleProfile(name="tenant_a", parent_profile="default", ...))

        config = registry.get_or_raise("tenant_a").rules
        ```
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._profiles: dict[str, RuleProfile] = {}

    def register(self, profile: RuleProfile, overwrite: bool = False) -> None:
        """Register a profile.

        Args:
            profile: Profile to register.
            overwrite: Whether to overwrite an existing profile.

        Raises:
            ValueError: If a profile with the same name exists and overwrite=False.
            ProfileValidationError: If the (merged) profile is contradictory.
        """
        if profile.name in self._profiles and not overwrite:
            raise ValueError(
                f"Profile '{profile.name}' already registered. "
                "Use overwrite=True to replace."
            )

        if profile.parent_profile:
            parent = self._profiles.get(profile.parent_profile)
            if parent:
                profile = profile.merge_with_parent(parent)

        profile.validate_profile()
        self._profiles[profile.name] = profile

    def get_or_raise(self, name: str) -> RuleProfile:
        """Get profile by name.

        Raises:
            KeyError: If profile not found.
        """
        if name not in self._profiles:
            raise KeyError(f"Profile '{name}' not found in registry")
        return self._profiles[name]

    def __contains__(self, name: str) -> bool:
        return name in self._profiles

    def __iter__(self) -> Iterator[str]:
        """Iterate over profile names in registration order."""
        return iter(self._profiles)
