"""View driver: screen state per render pass, autoscroll and downloads."""

import logging
import os
import re
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from council_chat.models import Conversation
from council_chat.stages import MessageView, project_message
from council_chat.submission import KeyPress, SendMessage, SubmissionController
from council_chat.transcript import DEFAULT_DATE_FORMAT, export_transcript

logger = logging.getLogger(__name__)

TRANSCRIPT_MIME_TYPE = "text/markdown"

WELCOME_TITLE = "Welcome to LLM Council"
WELCOME_HINT = "Create a new conversation to get started"
EMPTY_TITLE = "Start a conversation"
EMPTY_HINT = "Ask a question to consult the LLM Council"
LOADING_TEXT = "Consulting the council..."
INPUT_PLACEHOLDER = "Ask your question... (Shift+Enter for new line, Enter to send)"

Deliver = Callable[[Path, str], None]


def transcript_filename(title: str | None) -> str:
    """Download filename for a conversation title.

    "Hello, World!" -> "hello--world-.md"; no title -> "council-deliberation.md".
    """
    stem = title or "council-deliberation"
    return re.sub(r"[^A-Za-z0-9]", "-", stem).lower() + ".md"


@dataclass(frozen=True)
class TranscriptArtifact:
    filename: str
    content: str
    mime_type: str = TRANSCRIPT_MIME_TYPE


@dataclass(frozen=True)
class ChatView:
    """Everything the front end needs to draw one frame."""

    conversation: Conversation | None
    messages: tuple[MessageView, ...]
    is_loading: bool
    input_text: str
    show_input: bool
    send_enabled: bool
    show_download: bool

    @property
    def is_welcome(self) -> bool:
        return self.conversation is None

    @property
    def is_empty(self) -> bool:
        return self.conversation is not None and not self.messages

    @property
    def input_enabled(self) -> bool:
        return not self.is_loading

    @property
    def show_loading_indicator(self) -> bool:
        return self.conversation is not None and self.is_loading


@contextmanager
def _staged_artifact(artifact: TranscriptArtifact) -> Iterator[Path]:
    """Hold the artifact in a temp file for exactly the duration of the block."""
    fd, name = tempfile.mkstemp(prefix="council-", suffix=".md")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(artifact.content)
        yield path
    finally:
        path.unlink(missing_ok=True)


class ViewDriver:
    """Drives one conversation view from successive conversation snapshots.

    Collaborators:
        on_send_message: receives accepted input text.
        scroll_to_end: moves the view to the anchor after the last message.
        deliver: receives (temp_path, filename) to hand the transcript to the
            user; the temp file is removed as soon as it returns.
    """

    def __init__(
        self,
        on_send_message: SendMessage,
        scroll_to_end: Callable[[], None],
        deliver: Deliver,
        date_format: str = DEFAULT_DATE_FORMAT,
        allow_follow_ups: bool = False,
    ) -> None:
        self.submission = SubmissionController(on_send_message)
        self._scroll_to_end = scroll_to_end
        self._deliver = deliver
        self._date_format = date_format
        self._allow_follow_ups = allow_follow_ups
        self._conversation: Conversation | None = None
        self._rendered = False
        self._last_id: str | None = None  # survives welcome-screen renders

    @property
    def conversation(self) -> Conversation | None:
        return self._conversation

    def render(self, conversation: Conversation | None, is_loading: bool = False) -> ChatView:
        """Build the screen for a snapshot, scrolling once if it changed."""
        previous = self._conversation
        changed = not self._rendered or conversation != previous
        if conversation is not None:
            if self._last_id is not None and conversation.id != self._last_id:
                self.submission.reset()
            self._last_id = conversation.id

        self._conversation = conversation
        self._rendered = True
        self.submission.is_loading = is_loading

        messages = tuple(project_message(m) for m in conversation.messages) if conversation else ()
        view = ChatView(
            conversation=conversation,
            messages=messages,
            is_loading=is_loading,
            input_text=self.submission.input_text,
            show_input=conversation is not None and (not messages or self._allow_follow_ups),
            send_enabled=self.submission.can_send,
            show_download=bool(messages) and not is_loading,
        )

        # No anchor exists without a conversation, so nothing to scroll to.
        if changed and conversation is not None:
            logger.debug("Conversation %s updated, scrolling to end", conversation.id)
            self._scroll_to_end()
        return view

    def update_input(self, text: str) -> None:
        self.submission.update_input(text)

    def submit(self) -> bool:
        return self.submission.submit()

    def handle_key(self, press: KeyPress) -> bool:
        return self.submission.handle_key(press)

    def build_artifact(self) -> TranscriptArtifact:
        title = self._conversation.title if self._conversation else None
        return TranscriptArtifact(
            filename=transcript_filename(title),
            content=export_transcript(self._conversation, self._date_format),
        )

    def download(self) -> TranscriptArtifact:
        """Export the current conversation and hand it to the deliver collaborator."""
        artifact = self.build_artifact()
        with _staged_artifact(artifact) as path:
            self._deliver(path, artifact.filename)
        logger.info("Transcript downloaded as %s", artifact.filename)
        return artifact
