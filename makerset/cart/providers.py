"""Provider display-name resolution."""
from typing import Optional

from makerset.config import PLATFORM_PROVIDER_NAME, UNKNOWN_PROVIDER_NAME


def resolve_provider_name(
    provider_id: Optional[int],
    provider_code: Optional[str] = None,
    provider_company: Optional[str] = None,
    provider_name: Optional[str] = None,
) -> str:
    """
    Resolve the name shown for a provider.

    A None provider_id is the platform itself. Otherwise the first
    non-empty of code, company and name is used.
    """
    if provider_id is None:
        return PLATFORM_PROVIDER_NAME
    for candidate in (provider_code, provider_company, provider_name):
        if candidate:
            return candidate
    return UNKNOWN_PROVIDER_NAME


def provider_name_for(obj) -> str:
    """Resolve the provider name of a CartItem or CatalogSet."""
    return resolve_provider_name(
        obj.provider_id,
        obj.provider_code,
        obj.provider_company,
        obj.provider_name,
    )
