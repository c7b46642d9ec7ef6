"""Shared pytest fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from config.config_loader import AppConfig, DefaultsConfig, DisplayConfig
from council_chat.models import (
    AggregateRanking,
    AssistantMessage,
    Conversation,
    FinalResponse,
    LoadingState,
    ModelResponse,
    PeerRanking,
    StageMetadata,
    UserMessage,
)


@pytest.fixture
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        defaults=DefaultsConfig(output_dir=tmp_path / "output", inbox_dir=tmp_path / "inbox"),
        display=DisplayConfig(),
    )


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Write a settings.yaml pointing output and inbox into tmp_path."""
    settings = {
        "defaults": {
            "output_dir": str(tmp_path / "output"),
            "inbox_dir": str(tmp_path / "inbox"),
        },
        "display": {
            "date_format": "%Y-%m-%d %H:%M",
            "allow_follow_ups": False,
            "follow_interval_sec": 0.01,
        },
    }
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings), encoding="utf-8")
    return path


@pytest.fixture
def user_message() -> UserMessage:
    return UserMessage(content="Should we use YAML or JSON for config?")


@pytest.fixture
def complete_assistant_message() -> AssistantMessage:
    return AssistantMessage(
        stage1=(
            ModelResponse(model="openai/gpt-4", response="Use YAML for humans."),
            ModelResponse(model="localmodel", response="JSON is stricter."),
        ),
        stage2=(
            PeerRanking(
                model="openai/gpt-4",
                ranking="Response B is precise.\n\nFINAL RANKING:\n1. Response B\n2. Response A",
                parsed_ranking=("Response B", "Response A"),
            ),
            PeerRanking(
                model="localmodel",
                ranking="FINAL RANKING:\n1. Response A\n2. Response B",
                parsed_ranking=("Response A", "Response B"),
            ),
        ),
        stage3=FinalResponse(model="google/gemini-3-pro", response="Use YAML, validate with a schema."),
        metadata=StageMetadata(
            label_to_model={"Response A": "openai/gpt-4", "Response B": "localmodel"},
            aggregate_rankings=(
                AggregateRanking(model="localmodel", average_rank=1.5, rankings_count=2),
                AggregateRanking(model="openai/gpt-4", average_rank=1.5, rankings_count=2),
            ),
        ),
    )


@pytest.fixture
def sample_conversation(user_message, complete_assistant_message) -> Conversation:
    return Conversation(
        id="conv-1",
        created_at="2025-01-15T10:30:00+00:00",
        title="YAML vs JSON",
        messages=(user_message, complete_assistant_message),
    )


@pytest.fixture
def pending_assistant_message() -> AssistantMessage:
    return AssistantMessage(loading=LoadingState(stage1=True))


@pytest.fixture
def conversation_dict() -> dict:
    """Conversation as the backend stores it on disk."""
    return {
        "id": "conv-1",
        "created_at": "2025-01-15T10:30:00Z",
        "title": "YAML vs JSON",
        "messages": [
            {"role": "user", "content": "Should we use YAML or JSON?"},
            {
                "role": "assistant",
                "stage1": [{"model": "openai/gpt-4", "response": "YAML."}],
                "stage2": [
                    {
                        "model": "openai/gpt-4",
                        "ranking": "FINAL RANKING:\n1. Response A",
                        "parsed_ranking": ["Response A"],
                    }
                ],
                "stage3": {"model": "google/gemini-3-pro", "response": "Go with YAML."},
                "metadata": {
                    "label_to_model": {"Response A": "openai/gpt-4"},
                    "aggregate_rankings": [
                        {"model": "openai/gpt-4", "average_rank": 1, "rankings_count": 1}
                    ],
                },
            },
        ],
    }


@pytest.fixture
def conversation_file(tmp_path: Path, conversation_dict: dict) -> Path:
    path = tmp_path / "conv-1.json"
    path.write_text(json.dumps(conversation_dict), encoding="utf-8")
    return path
