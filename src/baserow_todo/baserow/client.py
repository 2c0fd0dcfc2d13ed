"""Async client for the Baserow row REST API."""

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from baserow_todo.baserow.schemas import RowPage, StatusUpdate, Task, TaskCreate
from baserow_todo.config import Config

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BaserowError(Exception):
    """Base class for failed Baserow calls."""


class BaserowConnectionError(BaserowError):
    """The request never reached Baserow (network failure, refused, timeout)."""


class BaserowHTTPError(BaserowError):
    """Baserow answered with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str = "") -> None:
        """Initialize with the response status line and body text."""
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"HTTP {status_code} {reason}".rstrip()
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class MalformedResponseError(BaserowError):
    """Baserow answered with a body that does not match the row schema."""


class TableClient(Protocol):
    """Protocol for the four row operations on one table."""

    async def list_rows(self) -> RowPage:
        """List the first page of rows."""
        ...

    async def create_row(self, row: TaskCreate) -> Task:
        """Insert a row and return it with its assigned id."""
        ...

    async def update_row(self, row_id: int, update: StatusUpdate) -> Task:
        """Patch a row and return its full representation."""
        ...

    async def delete_row(self, row_id: int) -> None:
        """Delete a row."""
        ...


class BaserowClient:
    """Table client talking to the Baserow REST API over httpx."""

    def __init__(self, config: Config, http_client: httpx.AsyncClient | None = None) -> None:
        """Initialize client for the configured table.

        Args:
            config: Application config holding URL, table id and token
            http_client: Optional preconfigured httpx client (tests pass one
                with a mock transport)
        """
        self._rows_url = config.rows_url
        self._params = {"user_field_names": "true"} if config.user_field_names else {}
        self._headers = {
            "Authorization": f"Token {config.api_token}",
            "Content-Type": "application/json",
        }
        self._http = http_client or httpx.AsyncClient(timeout=config.request_timeout)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def list_rows(self) -> RowPage:
        """List rows of the table.

        Only the first page Baserow returns is fetched.

        Returns:
            Page of rows with the total row count reported by Baserow

        Raises:
            BaserowError: If the call fails or the response is malformed
        """
        response = await self._request("GET", self._rows_url)
        page = self._parse(response, RowPage)
        logger.info(f"[BaserowClient] Listed {len(page.results)} rows (count: {page.count})")
        return page

    async def create_row(self, row: TaskCreate) -> Task:
        """Insert a row.

        Args:
            row: Fields of the new row

        Returns:
            The created row as stored by Baserow

        Raises:
            BaserowError: If the call fails or the response is malformed
        """
        response = await self._request("POST", self._rows_url, body=row.model_dump(mode="json"))
        task = self._parse(response, Task)
        logger.info(f"[BaserowClient] Created row {task.id}")
        return task

    async def update_row(self, row_id: int, update: StatusUpdate) -> Task:
        """Patch a row.

        Args:
            row_id: Baserow row id
            update: Fields to change

        Returns:
            The full updated row

        Raises:
            BaserowError: If the call fails or the response is malformed
        """
        response = await self._request(
            "PATCH", self._row_url(row_id), body=update.model_dump(mode="json")
        )
        task = self._parse(response, Task)
        logger.info(f"[BaserowClient] Updated row {row_id}")
        return task

    async def delete_row(self, row_id: int) -> None:
        """Delete a row.

        Raises:
            BaserowError: If the call fails
        """
        await self._request("DELETE", self._row_url(row_id))
        logger.info(f"[BaserowClient] Deleted row {row_id}")

    def _row_url(self, row_id: int) -> str:
        return f"{self._rows_url}{row_id}/"

    async def _request(
        self, method: str, url: str, body: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Send a request and check its status before anything reads the body."""
        try:
            response = await self._http.request(
                method, url, params=self._params, headers=self._headers, json=body
            )
        except httpx.TransportError as e:
            logger.warning(f"[BaserowClient] {method} {url} failed: {e!r}")
            raise BaserowConnectionError(f"Connection to Baserow failed: {e}") from e

        if not response.is_success:
            raise BaserowHTTPError(response.status_code, response.reason_phrase, response.text)
        return response

    def _parse(self, response: httpx.Response, model: type[M]) -> M:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.debug(f"[BaserowClient] Malformed body: {response.text[:200]}")
            raise MalformedResponseError(f"Malformed response from Baserow: {e}") from e
