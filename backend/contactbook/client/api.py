"""
Thin async HTTP wrapper around the ``/api/contacts`` endpoints.

Every call returns the decoded JSON body, or ``None`` for a 204 response,
and raises ``ApiError`` carrying the server's ``message`` on failure.
"""

import logging
import uuid
from typing import Any, Optional

import httpx

from contactbook.config import settings
from contactbook.contacts.schemas import ContactCreate, ContactResponse, ContactUpdate

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP error! status: {response.status_code}"


def handle_response(response: httpx.Response) -> Any:
    if response.is_error:
        message = _error_message(response)
        logger.error(
            "API Error: %s (%s %s -> %d)",
            message,
            response.request.method,
            response.request.url,
            response.status_code,
        )
        raise ApiError(message, response.status_code)
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        logger.error("API Error: non-JSON body from %s %s", response.request.method, response.request.url)
        raise ApiError("Invalid JSON response", response.status_code) from exc


class ContactService:
    """Async client for the contacts API.

    Pass ``client`` to share a connection pool or to route requests through a
    custom transport; otherwise one ``httpx.AsyncClient`` is created and owned
    by this instance.
    """

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def __aenter__(self) -> "ContactService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str = "", **kwargs) -> Any:
        try:
            response = await self._client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.error("API Error: %s %s%s failed: %s", method, self.base_url, path, exc)
            raise ApiError(str(exc) or type(exc).__name__) from exc
        return handle_response(response)

    async def get_contacts(self) -> list[ContactResponse]:
        data = await self._request("GET")
        return [ContactResponse.model_validate(item) for item in data or []]

    async def get_contact(self, contact_id: str | uuid.UUID) -> ContactResponse:
        data = await self._request("GET", f"/{contact_id}")
        return ContactResponse.model_validate(data)

    async def create_contact(self, contact: ContactCreate) -> ContactResponse:
        data = await self._request("POST", json=contact.model_dump(mode="json", by_alias=True))
        return ContactResponse.model_validate(data)

    async def update_contact(self, contact_id: str | uuid.UUID, contact: ContactUpdate) -> ContactResponse:
        data = await self._request(
            "PUT",
            f"/{contact_id}",
            json=contact.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        return ContactResponse.model_validate(data)

    async def delete_contact(self, contact_id: str | uuid.UUID) -> Optional[dict]:
        return await self._request("DELETE", f"/{contact_id}")
