"""Logging for credential discovery.

Token values never reach the log; only where they were found.
"""

from __future__ import annotations

import loguru
from loguru import logger

from betexport.services.credentials.types import Candidate


class CredentialLocatorLogger:
    """Handles all logging for the credential locator."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        """Initialize logger.

        Args:
            logger_instance: Logger instance to use (defaults to loguru.logger)
        """
        self._logger = logger_instance

    def scan_started(self, local_count: int, session_count: int, cookies: int) -> None:
        """Log the start of a storage scan."""
        self._logger.bind(
            local=local_count, session=session_count, cookies=cookies
        ).debug(
            "Scanning {} local, {} session entries and {} cookies",
            local_count,
            session_count,
            cookies,
        )

    def token_found(self, candidate: Candidate) -> None:
        """Log where the access token was found, without its value."""
        self._logger.bind(
            strategy=candidate.strategy,
            source=candidate.source,
            length=len(candidate.value),
        ).info(
            "Access token found via {} in {}", candidate.strategy, candidate.source
        )

    def token_missing(self) -> None:
        """Log that no access token was found."""
        self._logger.warning("No access token found in storage or cookies")

    def customer_found(self, candidate: Candidate) -> None:
        """Log where the customer id was found."""
        self._logger.bind(
            strategy=candidate.strategy, source=candidate.source
        ).info(
            "Customer id found via {} in {}", candidate.strategy, candidate.source
        )

    def customer_missing(self) -> None:
        """Log that no customer id was found."""
        self._logger.warning("No customer id found in token, storage or cookies")
