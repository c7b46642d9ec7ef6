"""Click CLI: show a conversation, export its transcript, queue a question."""

import logging
import sys
import time
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from config.config_loader import AppConfig, load_config
from council_chat.inbox import pending_questions, queue_question
from council_chat.loader import ConversationFormatError, load_conversation
from council_chat.models import Conversation, UserMessage
from council_chat.output import print_chat, save_to_dir
from council_chat.submission import KeyPress
from council_chat.view import ViewDriver

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _is_busy(conversation: Conversation) -> bool:
    """A conversation is busy while its last turn is unanswered or still running."""
    if not conversation.messages:
        return False
    last = conversation.messages[-1]
    if isinstance(last, UserMessage):
        return True
    return last.loading.stage1 or last.loading.stage2 or last.loading.stage3


def _load_or_exit(path: Path) -> Conversation:
    try:
        return load_conversation(path)
    except (FileNotFoundError, ConversationFormatError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)


def _ignore_send(text: str) -> None:
    logger.debug("show/export views do not accept input; dropped %d chars", len(text))


@click.group()
@click.option("--settings", "settings_path", default=None, type=click.Path(dir_okay=False),
              help="Path to settings.yaml (default: $COUNCIL_CHAT_SETTINGS or bundled file)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(ctx: click.Context, settings_path: str | None, verbose: bool) -> None:
    """Council Chat -- view and export LLM council deliberations.

    \b
    Examples:
      council-chat show data/conversations/abc.json
      council-chat show data/conversations/abc.json --follow
      council-chat export data/conversations/abc.json --output ./exports
      council-chat ask data/conversations/abc.json
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(Path(settings_path) if settings_path else None)
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    ctx.obj = config


@main.command()
@click.argument("conversation_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--follow", is_flag=True, help="Keep watching the file and redraw on every update")
@click.option("--interval", default=None, type=float, help="Polling interval in seconds for --follow")
@click.pass_obj
def show(config: AppConfig, conversation_path: Path, follow: bool, interval: float | None) -> None:
    """Render a conversation with its council stages."""
    updated: list[bool] = []
    driver = ViewDriver(
        on_send_message=_ignore_send,
        scroll_to_end=lambda: updated.append(True),
        deliver=save_to_dir(config.defaults.output_dir),
        date_format=config.display.date_format,
        allow_follow_ups=config.display.allow_follow_ups,
    )
    poll_sec = interval if interval is not None else config.display.follow_interval_sec

    while True:
        if follow:
            try:
                conversation = load_conversation(conversation_path)
            except (FileNotFoundError, ConversationFormatError) as exc:
                # Usually a half-written file; the next poll picks up the full one.
                logger.warning("Keeping previous snapshot: %s", exc)
                conversation = driver.conversation
        else:
            conversation = _load_or_exit(conversation_path)

        if conversation is not None:
            view = driver.render(conversation, is_loading=_is_busy(conversation))
            if updated:
                updated.clear()
                if follow:
                    console.clear()
                print_chat(view, console)
        if not follow:
            return
        try:
            time.sleep(poll_sec)
        except KeyboardInterrupt:
            return


@main.command()
@click.argument("conversation_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.pass_obj
def export(config: AppConfig, conversation_path: Path, output_path: str | None) -> None:
    """Save the conversation transcript as Markdown."""
    output_dir = Path(output_path) if output_path else config.defaults.output_dir
    conversation = _load_or_exit(conversation_path)

    driver = ViewDriver(
        on_send_message=_ignore_send,
        scroll_to_end=lambda: None,
        deliver=save_to_dir(output_dir),
        date_format=config.display.date_format,
    )
    driver.render(conversation, is_loading=_is_busy(conversation))
    artifact = driver.download()
    console.print(f"[dim]Saved to: {output_dir / artifact.filename}[/dim]")


@main.command()
@click.argument("conversation_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--inbox-dir", "inbox_dir_override", default=None,
              help="Override inbox folder path (default: from config)")
@click.pass_obj
def ask(config: AppConfig, conversation_path: Path, inbox_dir_override: str | None) -> None:
    """Type a question and queue it for the council.

    End a line with a backslash to continue on a new line (Shift+Enter).
    """
    inbox_dir = Path(inbox_dir_override) if inbox_dir_override else config.defaults.inbox_dir
    conversation = _load_or_exit(conversation_path)
    queued: list[Path] = []

    driver = ViewDriver(
        on_send_message=lambda text: queued.append(queue_question(inbox_dir, text, conversation.id)),
        scroll_to_end=lambda: None,
        deliver=save_to_dir(config.defaults.output_dir),
        date_format=config.display.date_format,
        allow_follow_ups=config.display.allow_follow_ups,
    )
    busy = _is_busy(conversation) or bool(pending_questions(inbox_dir, conversation.id))
    view = driver.render(conversation, is_loading=busy)
    print_chat(view, console)

    if not view.show_input:
        console.print("[yellow]This conversation does not accept new questions.[/yellow]")
        return
    if not view.input_enabled:
        console.print("[yellow]The council is still working on this conversation.[/yellow]")
        return

    while not queued:
        line = click.prompt("You", default="", show_default=False)
        if line.endswith("\\"):
            driver.update_input(driver.submission.input_text + line[:-1])
            driver.handle_key(KeyPress("Enter", shift=True))
            continue
        driver.update_input(driver.submission.input_text + line)
        driver.handle_key(KeyPress("Enter"))

    click.echo(f"Queued: {queued[0]}")


if __name__ == "__main__":
    main()
