"""Console output and operator confirmation."""

from __future__ import annotations

import sys
from typing import TextIO

from trident.schemas.campaign import CampaignRequest
from trident.services.exceptions import ConfirmationError
from trident.timeutil import format_duration

CAMPAIGN_SUMMARY = """
[Campaign Summary]
Not Before: {not_before}
Not After: {not_after}
Interval: {interval}
Username count: {user_count}
Password count: {password_count}
Provider: {provider}
Metadata: {metadata}

"""


def confirm(prompt: str, *, stream: TextIO | None = None, out: TextIO | None = None) -> bool:
    """
    Ask the operator a yes/no question.

    Args:
        prompt: The question to ask
        stream: Where the answer is read from (defaults to stdin)
        out: Where the question is written (defaults to stdout)

    Returns:
        True only if the answer is ``y`` or ``yes`` (case-insensitive)

    Raises:
        ConfirmationError: if no answer can be read
    """
    stream = stream if stream is not None else sys.stdin
    out = out if out is not None else sys.stdout

    out.write(f"{prompt} [y/N]: ")
    out.flush()

    try:
        response = stream.readline()
    except (OSError, ValueError) as exc:
        raise ConfirmationError("unable to read confirmation", cause=exc) from exc
    if not response:
        raise ConfirmationError("no confirmation received (end of input)")

    return response.strip().lower() in ("y", "yes")


def render_summary(request: CampaignRequest) -> str:
    """Render the human-readable campaign summary block."""
    return CAMPAIGN_SUMMARY.format(
        not_before=request.not_before,
        not_after=request.not_after,
        interval=format_duration(request.schedule_interval),
        user_count=len(request.users),
        password_count=len(request.passwords),
        provider=request.provider,
        metadata=request.provider_metadata,
    )


def print_summary(request: CampaignRequest, out: TextIO | None = None) -> None:
    """Print the campaign summary to stdout."""
    (out if out is not None else sys.stdout).write(render_summary(request))
