"""Human-facing labels for model identifiers."""

from typing import Mapping


def display_name(model: str) -> str:
    """Drop the provider prefix: "openai/gpt-4" -> "gpt-4".

    Identifiers without a "/" (or with nothing after it) are returned as-is.
    """
    _, sep, rest = model.partition("/")
    if sep and rest:
        return rest
    return model


def de_anonymize(text: str, label_to_model: Mapping[str, str] | None) -> str:
    """Replace "Response X" labels in a peer ranking with bold model names."""
    if not label_to_model:
        return text
    result = text
    for label, model in label_to_model.items():
        result = result.replace(label, f"**{display_name(model)}**")
    return result
