"""Holder validation: (provider_name, provider_key) pairs identify a grant holder."""

from permission_management.core.constants import CACHE_KEY_SEP, HOLDER_KEY_MAX_LENGTH
from permission_management.domain.enums import ProviderName
from permission_management.domain.exceptions import (
    InvalidHolderKeyException,
    ValidationException,
)


def validate_holder(provider_name: str, provider_key: str) -> None:
    """Raise if the provider name is unknown or the holder key is malformed.

    Raises:
        ValidationException: provider_name is not U, R or C.
        InvalidHolderKeyException: provider_key is empty, too long, or contains ':'.
    """
    if provider_name not in ProviderName.values():
        raise ValidationException(
            f"Unknown provider name {provider_name!r}; expected one of {ProviderName.values()}",
            field="provider_name",
        )
    if provider_key is None or not provider_key.strip():
        raise InvalidHolderKeyException(provider_key, "empty")
    if len(provider_key) > HOLDER_KEY_MAX_LENGTH:
        raise InvalidHolderKeyException(
            provider_key, f"longer than {HOLDER_KEY_MAX_LENGTH} characters"
        )
    if CACHE_KEY_SEP in provider_key:
        raise InvalidHolderKeyException(
            provider_key, f"contains separator {CACHE_KEY_SEP!r}"
        )
