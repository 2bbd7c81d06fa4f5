"""Find the signed-in user's access token and customer id in page storage.

The site's storage layout is undocumented, so discovery runs ranked
strategies in a fixed order and takes the first hit:

Token, per storage entry (local storage first, then session storage):
    raw-value -> known-key -> nested-json
then cookies: ``accesstoken``/``accesstokenv2``, then ``cxp-token``.

Customer id:
    token-claims, then per storage entry raw-value -> nested-json,
    then the ``customer-id`` cookie.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from betexport.adapters.browser.base import StorageEntry, StorageSnapshot
from betexport.services.credentials.jwt import is_likely_jwt
from betexport.services.credentials.logger import CredentialLocatorLogger
from betexport.services.credentials.predicates import (
    Predicate,
    customer_candidate,
    customer_id_from_claims,
    known_key_token,
    normalize_customer_id,
    parse_structured,
    search_nested,
    token_candidate,
)
from betexport.services.credentials.types import Candidate, Credential

TOKEN_NOT_FOUND_MESSAGE = (
    "Could not find your Sportsbet login. "
    "Make sure you are signed in on sportsbet.com.au."
)
ACCOUNT_NOT_FOUND_MESSAGE = (
    "Unable to detect your Sportsbet account ID. "
    "Visit Account > Transactions and try again."
)


class CredentialLocatorError(Exception):
    """Base error for credential discovery."""


class CredentialNotFoundError(CredentialLocatorError):
    """No access token in storage or cookies."""

    def __init__(self, message: str = TOKEN_NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


class AccountNotFoundError(CredentialLocatorError):
    """No customer id in the token, storage or cookies."""

    def __init__(self, message: str = ACCOUNT_NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class EntryStrategy:
    """A named probe run against a single storage entry."""

    name: str
    probe: Callable[[StorageEntry], str | None]


@dataclass(frozen=True, slots=True)
class CookieStrategy:
    """A named probe run against the cookie jar."""

    name: str
    cookie_names: tuple[str, ...]
    accept: Callable[[str], str | None]
    # Unanchored strategies match the name inside longer cookie names too.
    anchored: bool = True

    def lookup(self, snapshot: StorageSnapshot) -> str | None:
        if self.anchored:
            return snapshot.cookie_value(*self.cookie_names)
        for cookie_name in self.cookie_names:
            found = snapshot.cookie_search(cookie_name)
            if found is not None:
                return found
        return None


def _nested(predicate: Predicate) -> Callable[[StorageEntry], str | None]:
    def probe(entry: StorageEntry) -> str | None:
        parsed = parse_structured(entry.value)
        return search_nested(parsed, predicate) if parsed is not None else None

    return probe


def _jwt_or_none(value: str) -> str | None:
    return value if is_likely_jwt(value) else None


TOKEN_ENTRY_STRATEGIES: tuple[EntryStrategy, ...] = (
    EntryStrategy("raw-value", lambda e: token_candidate(e.key, e.value)),
    EntryStrategy("known-key", lambda e: known_key_token(e.key, e.value)),
    EntryStrategy("nested-json", _nested(token_candidate)),
)
TOKEN_COOKIE_STRATEGIES: tuple[CookieStrategy, ...] = (
    CookieStrategy("cookie", ("accesstoken", "accesstokenv2"), _jwt_or_none),
    CookieStrategy("cookie", ("cxp-token",), _jwt_or_none),
)
CUSTOMER_ENTRY_STRATEGIES: tuple[EntryStrategy, ...] = (
    EntryStrategy("raw-value", lambda e: customer_candidate(e.key, e.value)),
    EntryStrategy("nested-json", _nested(customer_candidate)),
)
CUSTOMER_COOKIE_STRATEGIES: tuple[CookieStrategy, ...] = (
    CookieStrategy(
        "cookie", ("customer-id",), normalize_customer_id, anchored=False
    ),
)


def _first_hit(
    snapshot: StorageSnapshot,
    entry_strategies: Sequence[EntryStrategy],
    cookie_strategies: Sequence[CookieStrategy],
) -> Candidate | None:
    for entry in snapshot.entries():
        if not entry.value:
            continue
        for strategy in entry_strategies:
            hit = strategy.probe(entry)
            if hit:
                return Candidate(
                    value=hit,
                    strategy=strategy.name,
                    source=f"{entry.surface}:{entry.key}",
                )

    for cookie_strategy in cookie_strategies:
        raw = cookie_strategy.lookup(snapshot)
        if raw is None:
            continue
        hit = cookie_strategy.accept(raw.strip())
        if hit:
            return Candidate(
                value=hit,
                strategy=cookie_strategy.name,
                source="cookie:" + "|".join(cookie_strategy.cookie_names),
            )
    return None


def find_access_token(snapshot: StorageSnapshot) -> Candidate | None:
    """Return the first token candidate in storage order, or None."""
    return _first_hit(snapshot, TOKEN_ENTRY_STRATEGIES, TOKEN_COOKIE_STRATEGIES)


def find_customer_id(
    snapshot: StorageSnapshot, access_token: str | None = None
) -> Candidate | None:
    """Return the customer id, preferring the one embedded in the token."""
    if access_token:
        from_claims = customer_id_from_claims(access_token)
        if from_claims:
            return Candidate(
                value=from_claims, strategy="token-claims", source="access token"
            )
    return _first_hit(snapshot, CUSTOMER_ENTRY_STRATEGIES, CUSTOMER_COOKIE_STRATEGIES)


class CredentialLocator:
    """Derives a ``Credential`` from a storage snapshot."""

    def __init__(self, log: CredentialLocatorLogger | None = None) -> None:
        self._log = log or CredentialLocatorLogger()

    def locate(self, snapshot: StorageSnapshot) -> Credential:
        """Locate the token and customer id.

        Raises:
            CredentialNotFoundError: No token anywhere.
            AccountNotFoundError: A token but no customer id.
        """
        self._log.scan_started(
            len(snapshot.local_storage),
            len(snapshot.session_storage),
            len(snapshot.cookies()),
        )

        token = find_access_token(snapshot)
        if token is None:
            self._log.token_missing()
            raise CredentialNotFoundError()
        self._log.token_found(token)

        customer = find_customer_id(snapshot, token.value)
        if customer is None:
            self._log.customer_missing()
            raise AccountNotFoundError()
        self._log.customer_found(customer)

        return Credential(access_token=token.value, customer_id=customer.value)


def locate_credential(snapshot: StorageSnapshot) -> Credential:
    """Convenience wrapper around ``CredentialLocator().locate``."""
    return CredentialLocator().locate(snapshot)
