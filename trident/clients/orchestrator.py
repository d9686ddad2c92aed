from __future__ import annotations

import logging

import httpx

from trident.auth import Authenticator, NoAuthenticator
from trident.services.exceptions import (
    AuthenticationError,
    DownstreamServiceError,
    RequestBuildError,
    ServiceError,
)

logger = logging.getLogger(__name__)


class OrchestratorClient:
    """Synchronous HTTP client for the campaign orchestrator."""

    def __init__(
        self,
        base_url: str | None,
        *,
        authenticator: Authenticator | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else ""
        self._authenticator = authenticator or NoAuthenticator()
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._timeout,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "OrchestratorClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_request(self, path: str, content: bytes) -> httpx.Request:
        url = f"{self._base_url}{path}"
        try:
            request = self._ensure_client().build_request(
                "POST",
                url,
                content=content,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise RequestBuildError(f"error during request creation for {url!r}", cause=exc) from exc
        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestBuildError(f"orchestrator url {url!r} must be an absolute http(s) URL")
        return request

    def authenticate(self, request: httpx.Request) -> None:
        try:
            self._authenticator.auth(request)
        except ServiceError:
            raise
        except Exception as exc:
            raise AuthenticationError("error during authentication", cause=exc) from exc

    def send(self, request: httpx.Request) -> httpx.Response:
        try:
            response = self._ensure_client().send(request)
        except httpx.RequestError as exc:
            logger.debug("Unable to reach orchestrator at %s: %s", request.url, exc)
            raise DownstreamServiceError(
                "error sending request", status_code=None, cause=exc
            ) from exc
        logger.debug("Orchestrator responded %s: %s", response.status_code, response.text)
        return response

    def post(self, path: str, content: bytes) -> httpx.Response:
        """Build, authenticate and send one POST request.

        The response status is returned as-is; callers decide what a non-2xx
        reply means.
        """
        request = self.build_request(path, content)
        self.authenticate(request)
        return self.send(request)
