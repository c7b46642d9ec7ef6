"""Build conversation snapshots from the JSON the council backend stores."""

import json
import logging
from pathlib import Path
from typing import Any

from council_chat.models import (
    AggregateRanking,
    AssistantMessage,
    Conversation,
    FinalResponse,
    LoadingState,
    Message,
    ModelResponse,
    PeerRanking,
    StageMetadata,
    UserMessage,
)

logger = logging.getLogger(__name__)


class ConversationFormatError(ValueError):
    """Raised when conversation data does not have the expected shape."""


def _require_dict(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ConversationFormatError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _optional_list(raw: dict, key: str, what: str) -> list | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConversationFormatError(f"{what}.{key} must be a list")
    return value


def _parse_stage1(items: list | None) -> tuple[ModelResponse, ...] | None:
    if items is None:
        return None
    return tuple(
        ModelResponse(model=str(item["model"]), response=str(item.get("response", "")))
        for item in (_require_dict(i, "stage1 entry") for i in items)
    )


def _parse_stage2(items: list | None) -> tuple[PeerRanking, ...] | None:
    if items is None:
        return None
    rankings: list[PeerRanking] = []
    for item in items:
        item = _require_dict(item, "stage2 entry")
        parsed = item.get("parsed_ranking")
        rankings.append(
            PeerRanking(
                model=str(item["model"]),
                ranking=str(item.get("ranking", "")),
                parsed_ranking=tuple(str(label) for label in parsed) if isinstance(parsed, list) else None,
            )
        )
    return tuple(rankings)


def _parse_stage3(item: Any) -> FinalResponse | None:
    if item is None:
        return None
    item = _require_dict(item, "stage3")
    return FinalResponse(model=str(item["model"]), response=str(item.get("response", "")))


def _parse_metadata(raw: Any) -> StageMetadata:
    if raw is None:
        return StageMetadata()
    raw = _require_dict(raw, "metadata")

    label_to_model = raw.get("label_to_model")
    if label_to_model is not None:
        label_to_model = {str(k): str(v) for k, v in _require_dict(label_to_model, "label_to_model").items()}

    aggregate_raw = _optional_list(raw, "aggregate_rankings", "metadata")
    aggregate = None
    if aggregate_raw is not None:
        aggregate = tuple(
            AggregateRanking(
                model=str(entry["model"]),
                average_rank=float(entry["average_rank"]),
                rankings_count=int(entry["rankings_count"]) if entry.get("rankings_count") is not None else None,
            )
            for entry in (_require_dict(e, "aggregate ranking") for e in aggregate_raw)
        )

    return StageMetadata(label_to_model=label_to_model, aggregate_rankings=aggregate)


def _parse_loading(raw: Any) -> LoadingState:
    if raw is None:
        return LoadingState()
    raw = _require_dict(raw, "loading")
    return LoadingState(
        stage1=bool(raw.get("stage1", False)),
        stage2=bool(raw.get("stage2", False)),
        stage3=bool(raw.get("stage3", False)),
    )


def parse_message(raw: Any) -> Message:
    """Parse one message dict into a UserMessage or AssistantMessage."""
    raw = _require_dict(raw, "message")
    role = raw.get("role")
    if role == "user":
        return UserMessage(content=str(raw.get("content", "")))
    if role == "assistant":
        try:
            return AssistantMessage(
                stage1=_parse_stage1(_optional_list(raw, "stage1", "message")),
                stage2=_parse_stage2(_optional_list(raw, "stage2", "message")),
                stage3=_parse_stage3(raw.get("stage3")),
                metadata=_parse_metadata(raw.get("metadata")),
                loading=_parse_loading(raw.get("loading")),
            )
        except ConversationFormatError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ConversationFormatError(f"Malformed assistant message: {exc}") from exc
    raise ConversationFormatError(f"Unknown message role: {role!r}")


def parse_conversation(raw: Any) -> Conversation:
    """Parse a conversation dict ({id, created_at, title, messages}).

    Raises:
        ConversationFormatError: If the data does not describe a conversation.
    """
    raw = _require_dict(raw, "conversation")
    messages_raw = raw.get("messages", [])
    if not isinstance(messages_raw, list):
        raise ConversationFormatError("conversation.messages must be a list")

    title = raw.get("title")
    return Conversation(
        id=str(raw.get("id", "")),
        created_at=str(raw.get("created_at", "")),
        title=str(title) if title is not None else None,
        messages=tuple(parse_message(m) for m in messages_raw),
    )


def load_conversation(path: Path) -> Conversation:
    """Read and parse a conversation JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConversationFormatError: If the file is not valid conversation JSON.
    """
    if not path.exists():
        raise FileNotFoundError(f"Conversation file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConversationFormatError(f"{path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConversationFormatError(f"{path} is not valid JSON: {exc}") from exc

    conversation = parse_conversation(raw)
    logger.debug("Loaded conversation %s (%d messages) from %s", conversation.id, len(conversation.messages), path)
    return conversation
