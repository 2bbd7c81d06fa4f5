"""Credential discovery over a page's client-side storage."""

from betexport.services.credentials.locator import (
    AccountNotFoundError,
    CredentialLocator,
    CredentialLocatorError,
    CredentialNotFoundError,
    find_access_token,
    find_customer_id,
    locate_credential,
)
from betexport.services.credentials.types import Candidate, Credential

__all__ = [
    "AccountNotFoundError",
    "Candidate",
    "Credential",
    "CredentialLocator",
    "CredentialLocatorError",
    "CredentialNotFoundError",
    "find_access_token",
    "find_customer_id",
    "locate_credential",
]
