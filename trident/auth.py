"""Authenticators that sign outgoing orchestrator requests."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from trident.config import Settings
from trident.services.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class Authenticator(Protocol):
    """Anything that can augment a built request before it is sent."""

    def auth(self, request: httpx.Request) -> None:
        ...


class NoAuthenticator:
    """Sends requests unchanged, for orchestrators behind a trusted network."""

    def auth(self, request: httpx.Request) -> None:
        logger.debug("No authenticator configured; sending %s unsigned", request.url)


class BearerTokenAuthenticator:
    """Attaches a static bearer token as the ``Authorization`` header."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    def auth(self, request: httpx.Request) -> None:
        if not self._token:
            raise AuthenticationError("bearer token is empty")
        request.headers["Authorization"] = f"Bearer {self._token}"


def get_authenticator(settings: Settings) -> Authenticator:
    if settings.auth_token:
        return BearerTokenAuthenticator(settings.auth_token)
    return NoAuthenticator()
