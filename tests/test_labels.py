"""Tests for council_chat/labels.py."""

from council_chat.labels import de_anonymize, display_name


def test_display_name_drops_provider():
    assert display_name("openai/gpt-4") == "gpt-4"


def test_display_name_without_slash_is_unchanged():
    assert display_name("localmodel") == "localmodel"


def test_display_name_keeps_everything_after_first_slash():
    assert display_name("meta/llama/3-70b") == "llama/3-70b"


def test_display_name_trailing_slash_falls_back():
    assert display_name("openai/") == "openai/"


def test_de_anonymize_replaces_labels():
    text = "Response A is vague. Response B is better.\nFINAL RANKING:\n1. Response B\n2. Response A"
    result = de_anonymize(text, {"Response A": "openai/gpt-4", "Response B": "localmodel"})
    assert "Response A" not in result
    assert "**gpt-4** is vague" in result
    assert "1. **localmodel**" in result


def test_de_anonymize_without_mapping():
    assert de_anonymize("Response A", None) == "Response A"
    assert de_anonymize("Response A", {}) == "Response A"
