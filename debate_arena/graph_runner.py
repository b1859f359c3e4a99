"""
graph_runner.py

Builds the LangGraph:
Proposition -> Opposition -> (Proposition | Judge) -> END

Each node is one scheduler transition; routing follows the speaker the
transition picked, so the graph and TurnScheduler.run() always agree.
The MemorySaver checkpointer stores the state after every node, keyed
by the session id.

Also exposes a run_debate() function that the UI (and tests) can call.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, StateGraph

from . import config
from .clients import ModelBackend, make_backend
from .generator import SpeechGenerator
from .judge import VerdictJudge
from .relay import StreamRelay
from .scheduler import Speaker, TurnScheduler
from .state import DebateState, VerdictRecord, new_debate_state
from .transcript import write_transcript

logger = logging.getLogger(__name__)


@dataclass
class DebateResult:
    session_id: str
    state: DebateState
    verdict: Optional[VerdictRecord]
    transcript_path: Optional[Path]
    # Compiled graph, kept so load_checkpoint() can read this session back
    graph: Any = None


def build_scheduler(
    debater_backend: ModelBackend,
    judge_backend: ModelBackend,
    relay: Optional[StreamRelay] = None,
) -> TurnScheduler:
    relay = relay or StreamRelay()
    generator = SpeechGenerator(debater_backend, relay)
    judge = VerdictJudge(judge_backend)
    return TurnScheduler(generator.generate, judge.judge, relay)


def _node(scheduler: TurnScheduler, speaker: Speaker):
    def run_node(state: DebateState) -> DebateState:
        _, new_state = scheduler.transition(speaker, state)
        return new_state

    run_node.__name__ = f"node_{speaker.name.lower()}"
    return run_node


def _route_after_opposition(state: DebateState) -> str:
    return state["next_speaker"]


def build_graph(scheduler: TurnScheduler, checkpointer=None):
    """
    Compile the debate graph around a scheduler.
    """
    graph = StateGraph(DebateState)

    graph.add_node(Speaker.PROPOSITION.value, _node(scheduler, Speaker.PROPOSITION))
    graph.add_node(Speaker.OPPOSITION.value, _node(scheduler, Speaker.OPPOSITION))
    graph.add_node(Speaker.JUDGE.value, _node(scheduler, Speaker.JUDGE))

    graph.set_entry_point(Speaker.PROPOSITION.value)
    graph.add_edge(Speaker.PROPOSITION.value, Speaker.OPPOSITION.value)
    graph.add_conditional_edges(
        Speaker.OPPOSITION.value,
        _route_after_opposition,
        {
            Speaker.PROPOSITION.value: Speaker.PROPOSITION.value,
            Speaker.JUDGE.value: Speaker.JUDGE.value,
        },
    )
    graph.add_edge(Speaker.JUDGE.value, END)

    return graph.compile(checkpointer=checkpointer or MemorySaver())


def graph_config(session_id: str, max_rounds: int, max_sub_rounds: int) -> dict:
    # Two speeches per sub-round plus the judge, with some headroom
    steps = 2 * max_rounds * max_sub_rounds + 1
    return {
        "configurable": {"thread_id": session_id},
        "recursion_limit": steps + 10,
    }


def load_checkpoint(compiled_graph, session_id: str) -> DebateState:
    """
    Latest checkpointed state for a session (empty dict if none).
    """
    snapshot = compiled_graph.get_state({"configurable": {"thread_id": session_id}})
    return dict(snapshot.values)


def run_debate(
    topic: str,
    max_rounds: int = config.MAX_ROUNDS,
    max_sub_rounds: int = config.MAX_SUB_ROUNDS,
    temperature: float = config.DEFAULT_TEMPERATURE,
    relay: Optional[StreamRelay] = None,
    debater_backend: Optional[ModelBackend] = None,
    judge_backend: Optional[ModelBackend] = None,
    transcript_dir: Optional[str] = config.TRANSCRIPT_DIR,
    session_id: Optional[str] = None,
) -> DebateResult:
    """
    Run one whole debate and save the transcript.

    Backends default to the configured providers. The relay is closed
    when the run ends, whether it finished or failed.
    """
    relay = relay or StreamRelay()
    session_id = session_id or str(uuid.uuid4())

    try:
        initial_state = new_debate_state(topic, max_rounds, max_sub_rounds)

        if debater_backend is None:
            debater_backend = make_backend(
                config.DEBATER_PROVIDER,
                config.DEBATER_MODEL,
                temperature=temperature,
                max_tokens=config.DEBATER_MAX_TOKENS,
            )
        if judge_backend is None:
            judge_backend = make_backend(
                config.JUDGE_PROVIDER,
                config.JUDGE_MODEL,
                temperature=config.JUDGE_TEMPERATURE,
                max_tokens=config.JUDGE_MAX_TOKENS,
            )

        scheduler = build_scheduler(debater_backend, judge_backend, relay)
        compiled_graph = build_graph(scheduler)

        logger.info(
            "Debate %s started: %r (%d rounds x %d sub-rounds)",
            session_id,
            initial_state["topic"],
            max_rounds,
            max_sub_rounds,
        )
        final_state = compiled_graph.invoke(
            initial_state,
            graph_config(session_id, max_rounds, max_sub_rounds),
        )
    except Exception:
        logger.exception("Debate %s aborted", session_id)
        raise
    finally:
        relay.close()

    transcript_path = None
    if transcript_dir is not None:
        transcript_path = write_transcript(final_state["history"], transcript_dir)

    return DebateResult(
        session_id=session_id,
        state=final_state,
        verdict=final_state.get("verdict"),
        transcript_path=transcript_path,
        graph=compiled_graph,
    )
