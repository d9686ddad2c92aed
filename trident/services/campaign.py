from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Mapping, TextIO

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from trident.clients.orchestrator import OrchestratorClient
from trident.console import confirm as console_confirm
from trident.console import print_summary
from trident.schemas.campaign import CampaignRequest
from trident.services.exceptions import SerializationError, TimestampError
from trident.timeutil import parse_rfc3339
from trident.wordlists import read_lines

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(hours=672)
DEFAULT_INTERVAL = timedelta(seconds=1)
DEFAULT_PROVIDER = "okta"
CAMPAIGN_PATH = "/campaign"


@dataclass(frozen=True)
class CampaignOptions:
    """Arguments of a ``campaign create`` invocation."""

    user_file: str
    password_file: str
    not_before: str
    window: timedelta = DEFAULT_WINDOW
    interval: timedelta = DEFAULT_INTERVAL
    provider: str = DEFAULT_PROVIDER
    assume_yes: bool = False
    dry_run: bool = False


class CampaignService:
    def __init__(
        self,
        client: OrchestratorClient,
        *,
        providers: Mapping[str, Any] | None = None,
        confirm: Callable[[str], bool] = console_confirm,
        out: TextIO | None = None,
    ) -> None:
        self._client = client
        self._providers = dict(providers or {})
        self._confirm = confirm
        self._out = out

    def build_request(self, options: CampaignOptions) -> CampaignRequest:
        users = read_lines(options.user_file)
        passwords = read_lines(options.password_file)

        try:
            not_before = parse_rfc3339(options.not_before)
        except ValueError as exc:
            raise TimestampError("error parsing notBefore time", cause=exc) from exc

        try:
            return CampaignRequest.for_window(
                not_before=not_before,
                window=options.window,
                schedule_interval=options.interval,
                users=users,
                passwords=passwords,
                provider=options.provider,
                provider_metadata=self._providers.get(options.provider),
            )
        except OverflowError as exc:
            raise TimestampError("notAfter is out of range", cause=exc) from exc
        except ValidationError as exc:
            raise SerializationError("invalid campaign request", cause=exc) from exc

    @staticmethod
    def serialize(request: CampaignRequest) -> bytes:
        try:
            return request.model_dump_json().encode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationError(
                "error during JSON marshalling for request body", cause=exc
            ) from exc

    def submit(self, payload: bytes) -> None:
        response = self._client.post(CAMPAIGN_PATH, payload)
        # The orchestrator's status code is not inspected; only transport failures abort.
        logger.debug("Campaign response: %s", response)
        logger.info("successfully created campaign")

    def create(self, options: CampaignOptions) -> bool:
        """Run the create flow. Returns True when the campaign was sent."""
        request = self.build_request(options)
        payload = self.serialize(request)

        print_summary(request, self._out)

        if options.dry_run:
            out = self._out if self._out is not None else sys.stdout
            out.write(payload.decode("utf-8") + "\n")
            logger.info("dry run, not sending campaign")
            return False

        if not options.assume_yes and not self._confirm("Send campaign?"):
            logger.info("not sending campaign")
            return False

        self.submit(payload)
        return True

