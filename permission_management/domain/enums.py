"""Domain enumerations: grant status and holder provider names."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class PermissionGrantStatus(_ValuesMixin, str, Enum):
    """Explicit decision stored for one permission and one holder.

    UNDEFINED is the absence of a record and is never persisted.
    """

    GRANTED = "granted"
    PROHIBITED = "prohibited"
    UNDEFINED = "undefined"


class ProviderName(_ValuesMixin, str, Enum):
    """Kind of holder a grant belongs to."""

    USER = "U"
    ROLE = "R"
    CLIENT = "C"
