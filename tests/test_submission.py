"""Tests for council_chat/submission.py."""

from unittest.mock import MagicMock

import pytest

from council_chat.submission import KeyPress, SubmissionController


@pytest.fixture
def send() -> MagicMock:
    return MagicMock()


@pytest.fixture
def controller(send) -> SubmissionController:
    return SubmissionController(send)


def test_initial_input_is_empty(controller):
    assert controller.input_text == ""
    assert controller.can_send is False


def test_update_input_replaces_text(controller):
    controller.update_input("first")
    controller.update_input("second")
    assert controller.input_text == "second"


def test_submit_whitespace_is_noop(controller, send):
    controller.update_input("   ")
    assert controller.submit() is False
    send.assert_not_called()
    assert controller.input_text == "   "


def test_submit_while_loading_is_noop(controller, send):
    controller.update_input("What is the best database?")
    controller.is_loading = True
    assert controller.submit() is False
    send.assert_not_called()
    assert controller.input_text == "What is the best database?"


def test_submit_sends_raw_text_and_clears(controller, send):
    controller.update_input("  padded question \n")
    assert controller.submit() is True
    send.assert_called_once_with("  padded question \n")
    assert controller.input_text == ""


def test_submit_discards_collaborator_result(send, controller):
    send.return_value = object()
    controller.update_input("Q")
    assert controller.submit() is True


def test_send_failure_is_not_caught(controller, send):
    send.side_effect = RuntimeError("network down")
    controller.update_input("Q")
    with pytest.raises(RuntimeError, match="network down"):
        controller.submit()


def test_enter_submits_and_prevents_default(controller, send):
    controller.update_input("Question")
    prevented = controller.handle_key(KeyPress("Enter"))
    assert prevented is True
    send.assert_called_once_with("Question")
    assert controller.input_text == ""


def test_shift_enter_inserts_newline(controller, send):
    controller.update_input("Line one")
    prevented = controller.handle_key(KeyPress("Enter", shift=True))
    assert prevented is False
    send.assert_not_called()
    assert controller.input_text == "Line one\n"


def test_enter_on_blank_input_prevents_default_without_sending(controller, send):
    prevented = controller.handle_key(KeyPress("Enter"))
    assert prevented is True
    send.assert_not_called()


def test_enter_while_loading_does_not_send(controller, send):
    controller.update_input("Question")
    controller.is_loading = True
    controller.handle_key(KeyPress("Enter"))
    send.assert_not_called()
    assert controller.input_text == "Question"


def test_other_keys_are_ignored(controller, send):
    controller.update_input("abc")
    assert controller.handle_key(KeyPress("a")) is False
    assert controller.input_text == "abc"
    send.assert_not_called()


def test_reset_clears_input(controller):
    controller.update_input("draft")
    controller.reset()
    assert controller.input_text == ""


def test_shift_enter_while_loading_leaves_input_alone(controller, send):
    controller.update_input("Line one")
    controller.is_loading = True
    assert controller.handle_key(KeyPress("Enter", shift=True)) is False
    assert controller.input_text == "Line one"
    send.assert_not_called()
