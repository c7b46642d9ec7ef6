"""Queue submitted questions as Markdown files with YAML frontmatter."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import frontmatter
import yaml

logger = logging.getLogger(__name__)


def ensure_dir(inbox_dir: Path) -> None:
    """Create the inbox directory if it doesn't exist."""
    inbox_dir.mkdir(parents=True, exist_ok=True)


def queue_question(inbox_dir: Path, text: str, conversation_id: str) -> Path:
    """Write a question file for the council runner to pick up.

    Args:
        inbox_dir: Folder the runner scans.
        text: Question text as submitted.
        conversation_id: Conversation the answer belongs to.

    Returns:
        Path to the queued file.
    """
    ensure_dir(inbox_dir)
    now = datetime.now(timezone.utc)
    post = frontmatter.Post(text, conversation_id=conversation_id, queued_at=now.isoformat())

    safe_id = re.sub(r"[^A-Za-z0-9-]", "-", conversation_id) or "conversation"
    stem = f"{now.strftime('%Y%m%dT%H%M%S%f')}_{safe_id}"
    path = inbox_dir / f"{stem}.md"
    path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
    logger.info("Question queued: %s", path)
    return path


def pending_questions(inbox_dir: Path, conversation_id: str) -> list[Path]:
    """Return queued files for a conversation, oldest first (names are timestamped)."""
    if not inbox_dir.exists():
        return []
    pending: list[Path] = []
    for p in inbox_dir.glob("*.md"):
        try:
            metadata = frontmatter.load(str(p)).metadata
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            logger.warning("Skipping unreadable inbox file %s: %s", p.name, exc)
            continue
        if metadata.get("conversation_id") == conversation_id:
            pending.append(p)
    return sorted(pending)
