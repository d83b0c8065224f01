"""HTTP client for the deployments backend.

This is the resource store the dashboard core talks to. It owns transport concerns
(base URL, auth header, timeout) and converts every failure into the typed taxonomy
from ``shared.clients.errors``. It never retries on its own.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

import httpx

from shared.contracts.dto import (
    DeploymentDTO,
    DeploymentUpdate,
    EngineerDTO,
    ProjectDTO,
    RecordId,
)
from shared.logging import get_logger

from .errors import FetchError, NetworkError, StoreError, error_from_response

logger = get_logger(__name__)


class DeploymentsClient:
    """Async client for deployment, project and engineer endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> DeploymentsClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                follow_redirects=True,
                timeout=self.timeout,
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning("backend_unreachable", method=method, path=path, error=str(e))
            raise NetworkError(f"Unable to reach backend: {e}") from e

        if resp.is_error:
            error = error_from_response(resp)
            logger.warning(
                "backend_request_failed",
                method=method,
                path=path,
                status_code=resp.status_code,
                error_type=type(error).__name__,
            )
            raise error
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        if resp.status_code == HTTPStatus.NO_CONTENT or not resp.content:
            return None
        return resp.json()

    async def list_deployments(self) -> list[DeploymentDTO]:
        """Fetch the whole deployments collection.

        Raises:
            FetchError: on any transport or HTTP failure.
        """
        try:
            resp = await self._request("GET", "/deployments")
        except StoreError as e:
            raise FetchError(str(e), status_code=e.status_code, detail=e.detail) from e
        data = self._json(resp) or []
        return [DeploymentDTO.model_validate(item) for item in data]

    async def get_deployment(self, deployment_id: RecordId) -> DeploymentDTO:
        resp = await self._request("GET", f"/deployments/{deployment_id}")
        return DeploymentDTO.model_validate(resp.json())

    async def update_deployment(
        self, deployment_id: RecordId, payload: DeploymentUpdate
    ) -> DeploymentDTO:
        """Replace a deployment with a full-record payload."""
        resp = await self._request(
            "PUT", f"/deployments/{deployment_id}", json=payload.to_payload()
        )
        return DeploymentDTO.model_validate(resp.json())

    async def delete_deployment(self, deployment_id: RecordId) -> None:
        await self._request("DELETE", f"/deployments/{deployment_id}")

    async def list_projects(self) -> list[ProjectDTO]:
        resp = await self._request("GET", "/projects")
        return [ProjectDTO.model_validate(item) for item in self._json(resp) or []]

    async def list_engineers(self) -> list[EngineerDTO]:
        resp = await self._request("GET", "/engineers")
        return [EngineerDTO.model_validate(item) for item in self._json(resp) or []]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
