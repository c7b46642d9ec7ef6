"""Pure dataclasses for a council conversation. No logic, no deps."""

from dataclasses import dataclass, field
from typing import Literal, Mapping


@dataclass(frozen=True)
class ModelResponse:
    model: str             # "<provider>/<name>", e.g. "openai/gpt-4"
    response: str


@dataclass(frozen=True)
class PeerRanking:
    model: str
    ranking: str           # free-text evaluation, ends with a FINAL RANKING block
    parsed_ranking: tuple[str, ...] | None = None


@dataclass(frozen=True)
class AggregateRanking:
    model: str
    average_rank: float
    rankings_count: int | None = None


@dataclass(frozen=True)
class FinalResponse:
    model: str             # the chairman
    response: str


@dataclass(frozen=True)
class StageMetadata:
    label_to_model: Mapping[str, str] | None = None   # "Response A" -> model id
    aggregate_rankings: tuple[AggregateRanking, ...] | None = None


@dataclass(frozen=True)
class LoadingState:
    stage1: bool = False
    stage2: bool = False
    stage3: bool = False


@dataclass(frozen=True)
class UserMessage:
    content: str
    role: Literal["user"] = field(default="user", init=False)


@dataclass(frozen=True)
class AssistantMessage:
    stage1: tuple[ModelResponse, ...] | None = None
    stage2: tuple[PeerRanking, ...] | None = None
    stage3: FinalResponse | None = None
    metadata: StageMetadata = field(default_factory=StageMetadata)
    loading: LoadingState = field(default_factory=LoadingState)
    role: Literal["assistant"] = field(default="assistant", init=False)


Message = UserMessage | AssistantMessage


@dataclass(frozen=True)
class Conversation:
    id: str
    created_at: str        # ISO-8601 as stored by the backend
    title: str | None = None
    messages: tuple[Message, ...] = ()
