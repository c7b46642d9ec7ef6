"""Rich console rendering of a chat view and transcript file delivery."""

import logging
import shutil
from pathlib import Path

from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.spinner import Spinner
from rich.text import Text

from council_chat.labels import display_name
from council_chat.stages import MessageView, RankingsView, StageStatus, StageView
from council_chat.transcript import format_average_rank
from council_chat.view import (
    EMPTY_HINT,
    EMPTY_TITLE,
    INPUT_PLACEHOLDER,
    LOADING_TEXT,
    WELCOME_HINT,
    WELCOME_TITLE,
    ChatView,
)

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _loading(label: str) -> RenderableType:
    return Spinner("dots", text=Text(label, style="italic"))


def _stage1_body(stage: StageView) -> RenderableType:
    panels = [
        Panel(Markdown(resp.response), title=f"[bold]{escape(display_name(resp.model))}[/bold]", border_style="dim")
        for resp in stage.data
    ]
    return Group(*panels)


def _stage2_body(stage: StageView) -> RenderableType:
    view: RankingsView = stage.data
    parts: list[RenderableType] = []
    for ranking, text in zip(view.rankings, view.display_texts):
        parts.append(
            Panel(Markdown(text), title=f"[bold]{escape(display_name(ranking.model))}[/bold]", border_style="dim")
        )
        if ranking.parsed_ranking:
            extracted = "\n".join(f"{i}. {label}" for i, label in enumerate(ranking.parsed_ranking, start=1))
            parts.append(Text(f"Extracted Ranking:\n{extracted}", style="dim"))

    if view.aggregate_rankings:
        lines = [
            f"#{i} {display_name(entry.model)}  avg: {format_average_rank(entry.average_rank)}"
            + (f"  ({entry.rankings_count} votes)" if entry.rankings_count else "")
            for i, entry in enumerate(view.aggregate_rankings, start=1)
        ]
        parts.append(Panel(Text("\n".join(lines)), title="[bold]Aggregate Rankings (Street Cred)[/bold]", border_style="cyan"))
    return Group(*parts)


def _stage3_body(stage: StageView) -> RenderableType:
    final = stage.data
    return Panel(
        Markdown(final.response),
        title=f"[bold]Chairman: {escape(display_name(final.model))}[/bold]",
        border_style="green",
    )


_STAGE_BODIES = {1: _stage1_body, 2: _stage2_body, 3: _stage3_body}


def render_message(message: MessageView) -> RenderableType:
    """Build the renderable for one projected message."""
    if message.role == "user":
        return Panel(Markdown(message.content or ""), title="[bold]You[/bold]", border_style="blue")

    parts: list[RenderableType] = [Text("LLM Council", style="bold magenta")]
    for stage in message.stages:
        if stage.status is StageStatus.LOADING:
            parts.append(_loading(stage.loading_label))
        elif stage.status is StageStatus.READY:
            parts.append(Rule(f"[bold]{stage.title}[/bold]", align="left"))
            parts.append(_STAGE_BODIES[stage.number](stage))
    return Group(*parts)


def print_chat(view: ChatView, out: Console | None = None) -> None:
    """Print a whole frame to the console."""
    out = out or console

    if view.is_welcome:
        out.print(Panel(Text(WELCOME_HINT, justify="center"), title=f"[bold]{WELCOME_TITLE}[/bold]"))
        return

    conversation = view.conversation
    out.print(Rule(f"[bold cyan]{escape(conversation.title or 'Untitled')}[/bold cyan]"))

    if view.is_empty:
        out.print(Panel(Text(EMPTY_HINT, justify="center"), title=f"[bold]{EMPTY_TITLE}[/bold]"))

    for message in view.messages:
        out.print(render_message(message))

    if view.show_loading_indicator:
        out.print(_loading(LOADING_TEXT))

    if view.show_download:
        out.print(Text("Export with: council-chat export <conversation.json>", style="dim"))

    if view.show_input:
        out.print(Text(INPUT_PLACEHOLDER, style="dim italic"))


def save_to_dir(output_dir: Path):
    """Return a deliver callback that copies the staged transcript into output_dir."""

    def deliver(staged: Path, filename: str) -> None:
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / filename
        shutil.copyfile(staged, target)
        logger.info("Transcript saved to: %s", target)

    return deliver
