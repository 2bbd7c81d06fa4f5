from betexport.adapters.clients.sportsbet import (
    Cursor,
    DateRange,
    SportsbetApiError,
    SportsbetClient,
    SportsbetClientError,
    SportsbetResponseError,
    extract_transactions,
)

__all__ = [
    "Cursor",
    "DateRange",
    "SportsbetApiError",
    "SportsbetClient",
    "SportsbetClientError",
    "SportsbetResponseError",
    "extract_transactions",
]
