"""Unit tests for council_chat/inbox.py."""

from pathlib import Path

import frontmatter

from council_chat.inbox import pending_questions, queue_question


def test_queue_question_creates_dir_and_file(tmp_path: Path) -> None:
    inbox = tmp_path / "inbox"
    path = queue_question(inbox, "REST or GraphQL?", "conv-1")
    assert inbox.is_dir()
    assert path.parent == inbox
    assert path.suffix == ".md"
    assert path.name.endswith("_conv-1.md")


def test_queue_question_writes_frontmatter(tmp_path: Path) -> None:
    path = queue_question(tmp_path, "REST or GraphQL?", "conv-1")
    post = frontmatter.load(str(path))
    assert post.content == "REST or GraphQL?"
    assert post.metadata["conversation_id"] == "conv-1"
    assert "queued_at" in post.metadata


def test_queue_question_sanitizes_id_in_filename(tmp_path: Path) -> None:
    path = queue_question(tmp_path, "Q", "team/alpha 1")
    assert path.parent == tmp_path
    assert path.name.endswith("_team-alpha-1.md")


def test_pending_questions_filters_by_conversation(tmp_path: Path) -> None:
    mine = queue_question(tmp_path, "Mine", "conv-1")
    queue_question(tmp_path, "Theirs", "conv-2")
    assert pending_questions(tmp_path, "conv-1") == [mine]


def test_pending_questions_missing_dir(tmp_path: Path) -> None:
    assert pending_questions(tmp_path / "nope", "conv-1") == []


def test_pending_questions_skips_unreadable_file(tmp_path: Path) -> None:
    (tmp_path / "notes.md").write_text("---\nbad: [unclosed\n---\nbody\n", encoding="utf-8")
    mine = queue_question(tmp_path, "Mine", "conv-1")
    assert pending_questions(tmp_path, "conv-1") == [mine]
