"""Markdown transcript of a full council conversation."""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from council_chat.labels import display_name
from council_chat.models import AssistantMessage, Conversation, UserMessage

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_TWO_PLACES = Decimal("0.01")


def format_average_rank(value: float) -> str:
    """Format an average rank with exactly two decimals.

    Rounds half-up on the exact binary value of the float, so 3.456 -> "3.46",
    0.125 -> "0.13" and 2.005 -> "2.00" (2.005 is stored as 2.00499...).
    """
    return str(Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def format_created_at(created_at: str | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render an ISO-8601 timestamp in its own offset; unparseable values pass through."""
    if not created_at:
        return ""
    raw_value = created_at.strip()
    if raw_value.endswith("Z"):
        raw_value = f"{raw_value[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw_value)
    except ValueError:
        return created_at
    return parsed.strftime(date_format)


def _assistant_sections(msg: AssistantMessage) -> list[str]:
    parts: list[str] = []

    if msg.stage1 is not None:
        parts.append("## Stage 1: Individual Responses\n\n")
        for resp in msg.stage1:
            parts.append(f"### {display_name(resp.model)}\n\n{resp.response}\n\n")

    if msg.stage2 is not None:
        parts.append("## Stage 2: Peer Rankings\n\n")
        aggregate = msg.metadata.aggregate_rankings
        if aggregate is not None:
            parts.append("### Aggregate Rankings\n\n")
            # Given order is the collaborator's sort order; never re-sort here.
            for position, entry in enumerate(aggregate, start=1):
                parts.append(
                    f"{position}. **{display_name(entry.model)}** "
                    f"(avg rank: {format_average_rank(entry.average_rank)})\n"
                )
            parts.append("\n")
        for ranking in msg.stage2:
            parts.append(f"### Evaluation by {display_name(ranking.model)}\n\n{ranking.ranking}\n\n")

    if msg.stage3 is not None:
        parts.append("## Stage 3: Final Council Answer\n\n")
        parts.append(f"**Chairman:** {display_name(msg.stage3.model)}\n\n")
        parts.append(f"{msg.stage3.response}\n\n")

    parts.append("---\n\n")
    return parts


def export_transcript(
    conversation: Conversation | None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Serialize a conversation to Markdown.

    Args:
        conversation: The snapshot to export; None is treated as empty.
        date_format: strftime pattern for the creation date in the header.

    Returns:
        The transcript text, or "" when there are no messages.
    """
    if conversation is None or not conversation.messages:
        return ""

    parts: list[str] = [
        "# LLM Council Deliberation\n\n",
        f"**Title:** {conversation.title or 'Untitled'}\n",
        f"**Date:** {format_created_at(conversation.created_at, date_format)}\n\n",
        "---\n\n",
    ]

    for msg in conversation.messages:
        if isinstance(msg, UserMessage):
            parts.append(f"## User Query\n\n{msg.content}\n\n")
        else:
            parts.extend(_assistant_sections(msg))

    transcript = "".join(parts)
    logger.debug("Exported transcript for %s: %d messages, %d chars", conversation.id, len(conversation.messages), len(transcript))
    return transcript
