"""Input text ownership and the submit / Enter-key rules."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SendMessage = Callable[[str], Any]


@dataclass(frozen=True)
class KeyPress:
    key: str
    shift: bool = False


class SubmissionController:
    """Owns the transient input text of one conversation view.

    ``is_loading`` is supplied by the caller and gates new submissions; the
    controller itself never tracks whether a send is outstanding.
    """

    def __init__(self, on_send_message: SendMessage) -> None:
        self._on_send_message = on_send_message
        self.input_text = ""
        self.is_loading = False

    @property
    def can_send(self) -> bool:
        return bool(self.input_text.strip()) and not self.is_loading

    def update_input(self, text: str) -> None:
        self.input_text = text

    def reset(self) -> None:
        self.input_text = ""

    def submit(self) -> bool:
        """Forward the input to the send collaborator and clear it.

        Returns:
            True if the text was sent, False if the submit was a no-op
            (blank input, or a submission is already in flight).
        """
        if not self.can_send:
            logger.debug(
                "Submit ignored (blank=%s, loading=%s)",
                not self.input_text.strip(),
                self.is_loading,
            )
            return False

        # Raw text goes out; trimming is only the emptiness check.
        # Fire-and-forget: whatever the collaborator returns is discarded.
        self._on_send_message(self.input_text)
        self.input_text = ""
        return True

    def handle_key(self, press: KeyPress) -> bool:
        """Apply the Enter accelerator.

        Returns:
            True if the platform default (line insertion) must be suppressed.
        """
        if press.key != "Enter":
            return False
        if press.shift:
            if self.is_loading:
                return False
            self.input_text += "\n"
            return False
        self.submit()
        return True
