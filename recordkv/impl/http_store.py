"""
HTTP Transactional Store Client

This module provides the network variant of the transactional store: programs
are serialized to their wire form and submitted to a store service over HTTP.
"""

import logging
from typing import Optional

import httpx

from recordkv.base.exceptions import (
    ProgramFormatError,
    StoreClosedError,
    StoreCommunicationError,
    TransactionAbortedError,
)
from recordkv.base.program import Program, TransactionResult, to_wire
from recordkv.base.store import TransactionalStore

logger = logging.getLogger(__name__)


class HttpTransactionalStore(TransactionalStore):
    """
    Transactional store reached through the store service.

    **Expected service interface** (see recordkv.service.store_service):

    1. POST /execute - body {"program": <wire>}, returns {"ok": true, "text": "..."}
    2. GET /health - returns {"status": "ok"}

    One instance holds one httpx.Client and is meant to be used by a single
    benchmark worker thread.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.Client] = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
    ):
        """
        Initialize HTTP store.

        Args:
            base_url: Base URL of the store service
            http_client: Client to reuse (owned by the caller); a new one is created if omitted
            connect_timeout: Connection timeout in seconds for a created client
            read_timeout: Read timeout in seconds for a created client
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        if http_client is None:
            timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
            http_client = httpx.Client(timeout=timeout)
        self.http_client = http_client
        self._closed = False

    def execute(self, program: Program) -> TransactionResult:
        """
        Submit a program and wait for its result.

        Raises:
            StoreClosedError: If the store was closed
            ProgramFormatError: If the service rejected the program as malformed
            TransactionAbortedError: If the service aborted the transaction
            StoreCommunicationError: If communication fails
        """
        if self._closed:
            raise StoreClosedError()

        url = f"{self.base_url}/execute"
        try:
            response = self.http_client.post(url, json={"program": to_wire(program)})
            response.raise_for_status()
            result = response.json()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            details = e.response.text
            if status_code == 400:
                raise ProgramFormatError(details=details)
            if status_code == 409:
                raise TransactionAbortedError(details=details)
            logger.error(
                f"Store execute failed: {status_code}",
                extra={"url": url, "status_code": status_code}
            )
            raise StoreCommunicationError(details=f"HTTP {status_code}")

        except httpx.RequestError as e:
            logger.error(
                f"Failed to connect to store: {str(e)}",
                extra={"url": url}
            )
            raise StoreCommunicationError(details=str(e))

        if not isinstance(result, dict) or not result.get("ok", False):
            raise StoreCommunicationError(details=f"unexpected response: {result!r}")
        text = result.get("text", "")
        if not isinstance(text, str):
            raise StoreCommunicationError(details=f"unexpected response text: {text!r}")
        return TransactionResult(text)

    def check_health(self) -> bool:
        """
        Check if the store service is reachable.

        Returns:
            True if the service is healthy, False otherwise
        """
        try:
            response = self.http_client.get(f"{self.base_url}/health")
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning(f"Store health check failed: {str(e)}")
            return False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self.http_client.close()
        logger.info(f"HttpTransactionalStore closed: {self.base_url}")
