"""
console.py

Terminal front end: asks for the motion, streams the speeches, prints
the verdict.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from . import config
from .graph_runner import DebateResult
from .relay import Token, TurnEnd, TurnStart, Verdict
from .session import DebateSession
from .state import PROPOSITION, VerdictRecord

logger = logging.getLogger(__name__)

console = Console()


def ask_topic() -> str:
    topic = ""
    while not topic:
        topic = Prompt.ask("[bold blue]Enter a topic[/]").strip()
    return topic


def verdict_panel(verdict: VerdictRecord) -> Panel:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Proposition", justify="center", style="cyan")
    table.add_column("Opposition", justify="center", style="magenta")
    table.add_row(f"{verdict['prop_score']} / 10", f"{verdict['opp_score']} / 10")

    color = "cyan" if verdict["winner"] == PROPOSITION else "magenta"
    return Panel.fit(
        table,
        title=f"[bold {color}]{verdict['winner']} wins[/]",
        subtitle=verdict["reason"],
        border_style="yellow",
    )


def run_console(
    topic: Optional[str] = None,
    max_rounds: int = config.MAX_ROUNDS,
    max_sub_rounds: int = config.MAX_SUB_ROUNDS,
    temperature: float = config.DEFAULT_TEMPERATURE,
    **run_kwargs,
) -> DebateResult:
    """
    Run one debate in the terminal and return its result.

    Errors from the run are re-raised after the stream has been printed.
    """
    console.print(Panel.fit("[bold blue]DEBATE SIMULATOR[/]", border_style="blue"))
    topic = (topic or "").strip() or ask_topic()

    with DebateSession(
        topic,
        max_rounds=max_rounds,
        max_sub_rounds=max_sub_rounds,
        temperature=temperature,
        **run_kwargs,
    ) as session:
        for event in session.events():
            if isinstance(event, TurnStart):
                color = "cyan" if event.side == PROPOSITION else "magenta"
                console.rule(f"[bold {color}]{event.side.upper()} | Round {event.round}")
            elif isinstance(event, Token):
                console.print(event.text, end="", markup=False, highlight=False)
            elif isinstance(event, TurnEnd):
                console.print()
            elif isinstance(event, Verdict):
                console.print(verdict_panel(event.record))

        result = session.wait()

    if result.transcript_path is not None:
        console.print(f"[dim]Transcript saved to {result.transcript_path}[/]")
    return result
