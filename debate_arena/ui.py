"""
ui.py

Defines the Gradio interface that runs a debate live.

- The topic comes from a textbox; rounds, sub-rounds and creativity from sliders.
- Speeches stream into colored bubbles as tokens arrive.
- The judge's verdict shows up as a card once the debate is over.
"""

import html
import logging
from typing import List, Optional

import gradio as gr

from . import config
from .errors import DebateError
from .relay import StreamEvent, Token, TurnEnd, TurnStart, Verdict
from .session import DebateSession
from .state import PROPOSITION, VerdictRecord

logger = logging.getLogger(__name__)

SIDE_COLORS = {
    "Proposition": "#0e9aa7",
    "Opposition": "#b3399a",
}


class TranscriptView:
    """
    Render state for one debate, folded from relay events.

    Only reads events; it never touches the debate state itself.
    """

    def __init__(self, topic: str):
        self.topic = topic
        self.bubbles: List[dict] = []
        self.active: Optional[dict] = None
        self.verdict: Optional[VerdictRecord] = None

    def apply(self, event: StreamEvent) -> None:
        if isinstance(event, TurnStart):
            self.active = {"side": event.side, "round": event.round, "content": ""}
        elif isinstance(event, Token):
            if self.active is not None:
                self.active["content"] += event.text
        elif isinstance(event, TurnEnd):
            if self.active is not None:
                self.bubbles.append(self.active)
            self.active = None
        elif isinstance(event, Verdict):
            self.verdict = event.record

    def _bubble_html(self, bubble: dict, thinking: bool = False) -> str:
        color = SIDE_COLORS.get(bubble["side"], "#888888")
        align = "flex-end" if bubble["side"] == PROPOSITION else "flex-start"
        if thinking and not bubble["content"]:
            body = "<em>Thinking...</em>"
        else:
            body = html.escape(bubble["content"]).replace("\n", "<br>")
        return (
            f'<div style="display:flex;flex-direction:column;align-items:{align};margin-bottom:12px;">'
            f'<strong style="color:{color};">{html.escape(bubble["side"].upper())} | Round {bubble["round"]}</strong>'
            f'<div style="border:2px solid {color};border-radius:10px;padding:8px 12px;max-width:70%;">'
            f"{body}</div></div>"
        )

    def render_html(self) -> str:
        parts = [f"<h3>🧠 Motion: {html.escape(self.topic)}</h3>"]
        parts.extend(self._bubble_html(bubble) for bubble in self.bubbles)
        if self.active is not None:
            parts.append(self._bubble_html(self.active, thinking=True))
        return "\n".join(parts)

    def render_verdict(self) -> str:
        if self.verdict is None:
            return "🧠 Debate in progress... the judge will rule at the end."
        v = self.verdict
        return (
            f"### ⚖️ Verdict: {v['winner']} wins\n\n"
            f"| Proposition | Opposition |\n"
            f"|:-----------:|:----------:|\n"
            f"| {v['prop_score']} / 10 | {v['opp_score']} / 10 |\n\n"
            f"{v['reason']}"
        )


def debate_live(
    topic: str,
    creativity: float,
    max_rounds: float,
    max_sub_rounds: float,
):
    """
    Live debate runner for Gradio.

    This is a generator: it yields after every streamed event so the
    bubbles fill in as the debaters speak.
    """

    topic = (topic or "").strip()
    if not topic:
        yield "Please enter a debate topic.", ""
        return

    view = TranscriptView(topic)
    session = DebateSession(
        topic,
        max_rounds=int(max_rounds),
        max_sub_rounds=int(max_sub_rounds),
        temperature=creativity,
    )

    with session:
        for event in session.events():
            view.apply(event)
            yield view.render_verdict(), view.render_html()

        try:
            result = session.wait()
        except DebateError as exc:
            logger.error("Debate failed: %s", exc)
            raise gr.Error(f"Debate aborted: {exc}") from exc

    final_md = view.render_verdict()
    if result.transcript_path is not None:
        final_md += f"\n\n📄 Transcript saved to `{result.transcript_path}`"
    yield final_md, view.render_html()


def create_ui(
    max_rounds: int = config.MAX_ROUNDS,
    max_sub_rounds: int = config.MAX_SUB_ROUNDS,
) -> gr.Blocks:
    """
    Build and return the Gradio Blocks app.
    """

    with gr.Blocks(title="Debate Arena (LangGraph)") as demo:
        gr.Markdown(
            """
            # 🤖 Debate Arena

            **Proposition vs Opposition, three phases, one judge.**

            - Round 1: constructive arguments
            - Round 2: line-by-line rebuttal
            - Round 3: closing speeches
            """
        )

        with gr.Row():
            # Left: controls (narrower)
            with gr.Column(scale=1, min_width=320):
                topic_input = gr.Textbox(
                    label="Motion",
                    placeholder="e.g. Should AI replace programmers?",
                    lines=3,
                )

                creativity_slider = gr.Slider(
                    minimum=config.MIN_TEMPERATURE,
                    maximum=config.MAX_TEMPERATURE,
                    value=config.DEFAULT_TEMPERATURE,
                    step=0.1,
                    label="Creativity (temperature)",
                    info="Higher = more creative arguments, lower = more focused.",
                )

                rounds_slider = gr.Slider(
                    minimum=1,
                    maximum=3,
                    value=min(max_rounds, 3),
                    step=1,
                    label="Rounds",
                    info="Constructive, rebuttal, closing.",
                )

                sub_rounds_slider = gr.Slider(
                    minimum=1,
                    maximum=max(5, max_sub_rounds),
                    value=max_sub_rounds,
                    step=1,
                    label="Exchanges per round",
                )

                run_button = gr.Button("🔥 Start Debate (Live)", variant="primary")

            # Right: outputs (wider)
            with gr.Column(scale=2):
                verdict_output = gr.Markdown(
                    label="Verdict",
                    value="The verdict will appear here after the debate.",
                )

                gr.Markdown("### 📜 Live Debate")
                transcript_output = gr.HTML(
                    value="<p>Speeches will stream in here.</p>",
                )

        # Wire button to live debate generator
        run_button.click(
            fn=debate_live,
            inputs=[
                topic_input,
                creativity_slider,
                rounds_slider,
                sub_rounds_slider,
            ],
            outputs=[verdict_output, transcript_output],
        )

    return demo
