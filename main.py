"""
main.py

Entry point. Launches the Gradio UI, or the terminal version with --console.
"""

import logging
from typing import Optional

import typer

from debate_arena import config
from debate_arena.errors import DebateError


def setup_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def main(
    console_mode: bool = typer.Option(False, "--console", help="Run in the terminal instead of the browser."),
    topic: Optional[str] = typer.Option(None, help="Motion to debate (console mode only)."),
    rounds: int = typer.Option(config.MAX_ROUNDS, help="Number of rounds (1-3)."),
    sub_rounds: int = typer.Option(config.MAX_SUB_ROUNDS, help="Exchanges per round."),
    temperature: float = typer.Option(config.DEFAULT_TEMPERATURE, help="Debater creativity."),
) -> None:
    setup_logging()

    if not console_mode:
        from debate_arena.ui import create_ui

        demo = create_ui(max_rounds=rounds, max_sub_rounds=sub_rounds)
        demo.launch()
        return

    from debate_arena.console import console, run_console

    try:
        run_console(
            topic=topic,
            max_rounds=rounds,
            max_sub_rounds=sub_rounds,
            temperature=temperature,
        )
    except DebateError as exc:
        console.print(f"[bold red]Debate aborted:[/] {exc}")
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    typer.run(main)
