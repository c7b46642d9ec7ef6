"""Stage projection: per-stage display state for a single message."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from council_chat.labels import de_anonymize
from council_chat.models import AssistantMessage, Message, UserMessage

STAGE_TITLES = {
    1: "Stage 1: Individual Responses",
    2: "Stage 2: Peer Rankings",
    3: "Stage 3: Final Council Answer",
}

LOADING_LABELS = {
    1: "Running Stage 1: Collecting individual responses...",
    2: "Running Stage 2: Peer rankings...",
    3: "Running Stage 3: Final synthesis...",
}


class StageStatus(Enum):
    HIDDEN = "hidden"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class StageView:
    number: int
    status: StageStatus
    data: Any = None  # stage payload, only set when READY

    @property
    def title(self) -> str:
        return STAGE_TITLES[self.number]

    @property
    def loading_label(self) -> str:
        return LOADING_LABELS[self.number]


@dataclass(frozen=True)
class RankingsView:
    """READY payload for stage 2."""

    rankings: tuple            # PeerRanking entries, raw
    display_texts: tuple[str, ...]  # ranking texts with labels replaced by model names
    aggregate_rankings: tuple | None


@dataclass(frozen=True)
class MessageView:
    role: str
    content: str | None = None                # user messages only
    stages: tuple[StageView, ...] = ()       # assistant messages only


def _stage_status(loading: bool, data: Any) -> StageStatus:
    # Loading wins so a stage being recomputed never shows stale content.
    if loading:
        return StageStatus.LOADING
    if data is not None:
        return StageStatus.READY
    return StageStatus.HIDDEN


def _project_stage(number: int, loading: bool, data: Any) -> StageView:
    status = _stage_status(loading, data)
    return StageView(number=number, status=status, data=data if status is StageStatus.READY else None)


def project_stages(message: AssistantMessage) -> tuple[StageView, StageView, StageView]:
    """Return the display state of stages 1-3 for an assistant message."""
    rankings = None
    if message.stage2 is not None:
        label_to_model = message.metadata.label_to_model
        rankings = RankingsView(
            rankings=message.stage2,
            display_texts=tuple(de_anonymize(r.ranking, label_to_model) for r in message.stage2),
            aggregate_rankings=message.metadata.aggregate_rankings,
        )

    return (
        _project_stage(1, message.loading.stage1, message.stage1),
        _project_stage(2, message.loading.stage2, rankings),
        _project_stage(3, message.loading.stage3, message.stage3),
    )


def project_message(message: Message) -> MessageView:
    """Project a message into what the view should draw for it."""
    if isinstance(message, UserMessage):
        return MessageView(role="user", content=message.content)
    return MessageView(role="assistant", stages=project_stages(message))
