"""Built-in rule profiles for common deployments."""

from payment_schedule.profiles.builtins import BuiltinProfiles

__all__ = ["BuiltinProfiles"]
