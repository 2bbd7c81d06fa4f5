from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, tzinfo
import json
from typing import Any, cast
import urllib.error
import urllib.parse
import urllib.request
import uuid

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from betexport.core.config import DEFAULT_API_URL, DEFAULT_PAGE_SIZE
from betexport.core.records import (
    TIMESTAMP_KEYS,
    TRANSACTION_ID_KEYS,
    first_present,
)
from betexport.core.timestamps import format_param_timestamp
from betexport.services.credentials.types import Credential

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


class SportsbetClientError(Exception):
    """Base error for Sportsbet client failures."""


class SportsbetApiError(SportsbetClientError):
    """Non-2xx response from the transactions endpoint."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Sportsbet responded {status_code}")
        self.status_code = status_code
        self.body = body


class SportsbetResponseError(SportsbetClientError):
    """Response body was not JSON."""


class DateRange(BaseModel):
    """Inclusive range in the API's ``dd/mm/yyyy`` form.

    Ordering is not checked; a reversed range is sent as given.
    """

    model_config = ConfigDict(frozen=True)

    from_date: str
    to_date: str

    @field_validator("from_date", "to_date")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("date must not be empty")
        return value


@dataclass(frozen=True, slots=True)
class Cursor:
    """Position after the last record of the previous page."""

    last_id: str | None = None
    last_time: str | None = None

    @classmethod
    def after(cls, record: Any, tz: tzinfo = UTC) -> Cursor:
        raw_id = first_present(record, TRANSACTION_ID_KEYS)
        raw_time = first_present(record, TIMESTAMP_KEYS)
        return cls(
            last_id=str(raw_id) if raw_id is not None else None,
            last_time=format_param_timestamp(raw_time, tz),
        )

    def to_params(self) -> dict[str, str]:
        if not self.last_id:
            return {}
        params = {"lastId": self.last_id}
        if self.last_time:
            params["lastTime"] = self.last_time
        return params


# ---------------------------------------------------------------------------
# Response extraction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExtractionPath:
    """A named location where a page's record list may live."""

    name: str
    keys: tuple[str, ...]

    def find(self, payload: Any) -> list[Any] | None:
        node = payload
        for key in self.keys:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node if isinstance(node, list) and node else None


EXTRACTION_PATHS: tuple[ExtractionPath, ...] = (
    ExtractionPath("transactions", ("transactions",)),
    ExtractionPath("items", ("items",)),
    ExtractionPath("transactionList", ("transactionList",)),
    ExtractionPath("transactions.items", ("transactions", "items")),
    ExtractionPath("transactions.transactions", ("transactions", "transactions")),
    ExtractionPath("data", ("data",)),
)


def extract_transactions(payload: Any) -> list[Any]:
    """Return the first non-empty record list in ``payload``.

    Falls back to the payload itself when it is a list, else an empty page.
    """
    for path in EXTRACTION_PATHS:
        found = path.find(payload)
        if found is not None:
            return found
    return payload if isinstance(payload, list) else []


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class SportsbetClient:
    """Client for the site's internal transaction history endpoint."""

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout_seconds: float | None = None,
        max_pages: int | None = None,
        display_tz: tzinfo = UTC,
        cookie_header: str | None = None,
        request_id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._api_url = api_url
        self._page_size = page_size
        self._timeout_seconds = timeout_seconds
        self._max_pages = max_pages
        self._display_tz = display_tz
        self._cookie_header = cookie_header
        self._request_id_factory = request_id_factory

    def build_headers(self, credential: Credential) -> dict[str, str]:
        """Headers for one request.

        The token is sent in every form the site has been seen to accept.
        """
        token = credential.access_token
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": BROWSER_USER_AGENT,
            "apptoken": "cxp-desktop-web",
            "channel": "cxp",
            "accesstoken": token,
            "authorization": f"Bearer {token}",
            "cxp-token": token,
            "customer-id": credential.customer_id,
            "x-request-id": self._request_id_factory(),
        }
        if self._cookie_header:
            headers["cookie"] = self._cookie_header
        return headers

    def build_params(self, date_range: DateRange, cursor: Cursor) -> dict[str, str]:
        return {
            "dateType": "CUSTOM",
            "filterType": "ALL",
            "fromDate": date_range.from_date,
            "toDate": date_range.to_date,
            "limit": str(self._page_size),
            "sortOrder": "DESC",
            **cursor.to_params(),
        }

    def _parse_json_response(self, body: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise SportsbetResponseError(
                f"Failed to parse Sportsbet response as JSON: {e}"
            ) from e

    def _get(self, params: dict[str, str], headers: dict[str, str]) -> Any:
        url = f"{self._api_url}?{urllib.parse.urlencode(params)}"
        req = urllib.request.Request(url, headers=headers, method="GET")  # noqa: S310

        try:
            with urllib.request.urlopen(  # noqa: S310 - external HTTPS
                req, timeout=self._timeout_seconds
            ) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            err_body = e.read().decode("utf-8", "ignore")
            raise SportsbetApiError(e.code, err_body) from e

        return self._parse_json_response(body)

    # High-level APIs -----------------------------------------------------

    def list_transactions_page(
        self,
        credential: Credential,
        date_range: DateRange,
        *,
        cursor: Cursor | None = None,
    ) -> list[Any]:
        """Fetch one page of records, newest first."""
        params = self.build_params(date_range, cursor or Cursor())
        payload = self._get(params, self.build_headers(credential))
        return extract_transactions(payload)

    def fetch_all_transactions(
        self, credential: Credential, date_range: DateRange
    ) -> list[dict[str, Any]]:
        """Follow the cursor until the API runs out of records.

        Stops on an empty page, a page shorter than the page size, or a last
        record with no id to continue from. ``max_pages``, when set, caps the
        number of requests.

        Raises:
            SportsbetApiError: On a non-2xx response. No retry.
            SportsbetResponseError: On a non-JSON body.
        """
        records: list[Any] = []
        cursor = Cursor()
        pages = 0

        while True:
            if self._max_pages is not None and pages >= self._max_pages:
                logger.bind(max_pages=self._max_pages, records=len(records)).warning(
                    "Stopped after {} pages (page ceiling)", pages
                )
                break

            chunk = self.list_transactions_page(credential, date_range, cursor=cursor)
            pages += 1
            logger.bind(page=pages, size=len(chunk)).debug(
                "Fetched page {} with {} records", pages, len(chunk)
            )
            if not chunk:
                break

            records.extend(chunk)
            cursor = Cursor.after(chunk[-1], self._display_tz)
            if not cursor.last_id or len(chunk) < self._page_size:
                break

        return cast(list[dict[str, Any]], records)
