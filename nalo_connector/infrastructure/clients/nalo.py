"""Nalo API HTTP client for login, documents and contract balances"""

import base64
import binascii
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List

import httpx

from nalo_connector.config import settings
from nalo_connector.domain.exceptions import AuthenticationFailure, ServiceUnavailable
from nalo_connector.domain.models import AccountSnapshot, FetchedDocument, RemoteDocumentRef
from nalo_connector.infrastructure.observability.metrics import request_failures_counter

logger = logging.getLogger(__name__)


def round_half_up(value: Any) -> float:
    """Round to cents, ties away from zero on the exact binary value of the float"""
    return float(Decimal(float(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class NaloClient:
    """
    Client for the Nalo web API.

    One instance holds one cookie-bearing session; use it as an async context
    manager so the underlying connection pool is closed after the run.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.nalo_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def __aenter__(self) -> "NaloClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def authenticate(self, login: str, password: str) -> str:
        """
        Exchange credentials for a session token.

        Raises:
            AuthenticationFailure: On refused login, missing token, or any request failure
        """
        try:
            response = await self._client.post(
                f"{self.base_url}/login",
                data={"email": login, "password": password, "userToken": "false"},
            )
            response.raise_for_status()
            token = response.json()["detail"].get("token")
        except httpx.HTTPStatusError as e:
            request_failures_counter.labels(endpoint="login").inc()
            logger.error(f"Login refused: {e.response.status_code}")
            raise AuthenticationFailure(f"Login refused: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            request_failures_counter.labels(endpoint="login").inc()
            logger.error(f"Login request failed: {e}")
            raise AuthenticationFailure(f"Login request failed: {e}") from e
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected login response: {e}")
            raise AuthenticationFailure(f"Unexpected login response: {e}") from e

        if not token:
            logger.error("Failed to retrieve user token")
            raise AuthenticationFailure("Failed to retrieve user token")

        return token

    async def list_signed_documents(self, token: str) -> List[RemoteDocumentRef]:
        """List signed contractual documents"""
        detail = await self._get_detail(token, "/profiles/me/signed-documents/", "signed-documents")
        try:
            return [RemoteDocumentRef(id=str(doc["id"]), filename=doc.get("filename")) for doc in detail]
        except (KeyError, TypeError) as e:
            raise ServiceUnavailable(f"Invalid signed document list: {e}") from e

    async def fetch_signed_document(self, token: str, ref: RemoteDocumentRef) -> FetchedDocument:
        """Download one signed document"""
        detail = await self._get_detail(
            token, f"/profiles/me/signed-document-content/{ref.id}", "signed-document-content"
        )
        return self._decode_document(detail)

    async def list_transactional_documents(self, token: str) -> List[RemoteDocumentRef]:
        """List transactional PDFs (transfer receipts, statements)"""
        detail = await self._get_detail(token, "/account/transactional-pdfs", "transactional-pdfs")
        try:
            return [
                RemoteDocumentRef(
                    id=str(doc["id"]),
                    contract_id=str(doc["contract_id"]),
                    id_operation=str(doc["id_operation"]),
                )
                for doc in detail
            ]
        except (KeyError, TypeError) as e:
            raise ServiceUnavailable(f"Invalid transactional document list: {e}") from e

    async def fetch_transactional_document(self, token: str, ref: RemoteDocumentRef) -> FetchedDocument:
        """Download one transactional PDF"""
        detail = await self._get_detail(
            token, f"/contract/get-document/{ref.contract_id}/{ref.id_operation}", "get-document"
        )
        return self._decode_document(detail)

    async def get_accounts(self, token: str) -> List[AccountSnapshot]:
        """
        Fetch life insurance contracts with their current value.

        Raises:
            AuthenticationFailure: If the response carries no details
            ServiceUnavailable: On request failure or malformed entries
        """
        payload = await self._get(token, "/projects/mine/without-details", "projects")
        detail = payload.get("detail") if isinstance(payload, dict) else None
        if not isinstance(detail, list):
            logger.error("Failed to retrieve project details")
            raise AuthenticationFailure("Failed to retrieve project details")

        try:
            return [
                AccountSnapshot(
                    label=project["name"],
                    balance=round_half_up(project["current_value"]),
                    number=str(project["id"]),
                    vendor_id=str(project["id"]),
                )
                for project in detail
            ]
        except (KeyError, ValueError, TypeError, InvalidOperation) as e:
            raise ServiceUnavailable(f"Invalid project data from Nalo: {e}") from e

    async def _get(self, token: str, path: str, endpoint: str) -> Any:
        try:
            response = await self._client.get(
                f"{self.base_url}{path}",
                headers={"Authorization": f"Token {token}"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            request_failures_counter.labels(endpoint=endpoint).inc()
            logger.error(f"Nalo API timeout after {self.timeout}s on {endpoint}")
            raise ServiceUnavailable(f"Nalo API timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            request_failures_counter.labels(endpoint=endpoint).inc()
            logger.error(f"Nalo API error on {endpoint}: {e.response.status_code}")
            raise ServiceUnavailable(f"Nalo API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            request_failures_counter.labels(endpoint=endpoint).inc()
            logger.error(f"Nalo API request failed on {endpoint}: {e}")
            raise ServiceUnavailable(f"Nalo API request failed: {e}") from e
        except ValueError as e:
            request_failures_counter.labels(endpoint=endpoint).inc()
            raise ServiceUnavailable(f"Invalid JSON from Nalo on {endpoint}") from e

    async def _get_detail(self, token: str, path: str, endpoint: str) -> Any:
        payload = await self._get(token, path, endpoint)
        try:
            return payload["detail"]
        except (KeyError, TypeError) as e:
            raise ServiceUnavailable(f"Missing detail in {endpoint} response") from e

    @staticmethod
    def _decode_document(detail: Any) -> FetchedDocument:
        try:
            return FetchedDocument(
                filename=detail["filename"],
                data=base64.b64decode(detail["data"]),
                import_date=datetime.now(),
            )
        except (KeyError, TypeError, binascii.Error) as e:
            raise ServiceUnavailable(f"Invalid document content from Nalo: {e}") from e
