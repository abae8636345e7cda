"""
playback.py — Step-by-Step Playback Controller
==============================================
The PlaybackController is the ONLY object the UI drives during a run.
It owns the trace, applies steps to the graph's view state, and exposes
start / pause / resume / step-forward / step-backward / reset.

State machine:
    IDLE, FINISHED  →  start()          →  PLAYING   (auto-advance armed)
    IDLE            →  step_forward()   →  PAUSED    (first step applied)
    PLAYING         →  pause()          →  PAUSED
    PAUSED          →  resume()         →  PLAYING
    PLAYING/PAUSED  →  (last step)      →  FINISHED
    FINISHED        →  step_backward()  →  PAUSED
    any             →  reset()          →  IDLE

Backward stepping is a full replay: view state goes back to baseline and
steps [0, index) are applied again.  The trace is immutable, so forward
stepping and replay land on identical view state for the same index.

Threading:
  Single logical thread.  Auto-advance is a scheduled callback, never a
  blocking wait; when it fires it re-checks the state and the run
  generation, so a pause or reset in between simply wins.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import config
from algorithms import compute_trace
from algorithms.step import FrontierEntry, PathStep, Step, UpdateStep, VisitStep
from engine.scheduler import ManualScheduler, Scheduler
from graph import Graph, INF, NodeId, ValidationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(Enum):
    IDLE     = "idle"
    PLAYING  = "playing"
    PAUSED   = "paused"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# View-state snapshot handed to renderers / subscribers
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NodeView:
    distance: float
    previous: Optional[NodeId]
    visited:  bool


@dataclass(frozen=True)
class ViewState:
    """
    Attributes:
        state              : PlaybackState at snapshot time.
        current_step_index : Number of steps applied so far.
        total_steps        : Length of the trace (0 when idle).
        nodes              : {node_id: NodeView} in graph order.
        final_path         : Path from the applied PathStep, else ().
        current_step       : Last applied Step, or None.
        start_id / end_id  : Endpoint ids as currently selected.
    """

    state:              PlaybackState
    current_step_index: int                      = 0
    total_steps:        int                      = 0
    nodes:              Dict[NodeId, NodeView]   = field(default_factory=dict)
    final_path:         Tuple[NodeId, ...]       = ()
    current_step:       Optional[Step]           = None
    start_id:           Optional[NodeId]         = None
    end_id:             Optional[NodeId]         = None

    @property
    def frontier(self) -> Tuple[FrontierEntry, ...]:
        """Frontier snapshot of the currently applied step only."""
        return self.current_step.frontier if self.current_step is not None else ()

    @property
    def highlighted_edge(self) -> Optional[Tuple[NodeId, NodeId]]:
        if isinstance(self.current_step, UpdateStep):
            return (self.current_step.from_node_id, self.current_step.node_id)
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state":            self.state.value,
            "currentStep":      self.current_step_index,
            "totalSteps":       self.total_steps,
            "nodes": [
                {
                    "id":       nid,
                    "distance": None if nv.distance == INF else nv.distance,
                    "previous": nv.previous,
                    "visited":  nv.visited,
                }
                for nid, nv in self.nodes.items()
            ],
            "finalPath":        list(self.final_path),
            "step":             self.current_step.to_dict() if self.current_step else None,
            "explanation":      self.current_step.explanation if self.current_step else "",
            "highlightedEdge":  list(self.highlighted_edge) if self.highlighted_edge else None,
            "start":            self.start_id,
            "end":              self.end_id,
        }


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        graph       : The live Graph whose nodes carry the view state.
        scheduler   : Where auto-advance callbacks are parked.
        state       : Current PlaybackState.
        trace       : Immutable list of Steps for the current run.
        current_idx : Number of steps applied (index of the next step).
        final_path  : Applied path, or ().
        delay       : Seconds between auto-advance steps.
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        scheduler: Optional[Scheduler] = None,
        delay: float = config.DEFAULT_STEP_DELAY,
        on_change: Optional[Callable[[ViewState], None]] = None,
    ):
        self.graph:       Graph               = graph if graph is not None else Graph()
        self.scheduler:   Scheduler           = scheduler if scheduler is not None else ManualScheduler()
        self.state:       PlaybackState       = PlaybackState.IDLE
        self.trace:       List[Step]          = []
        self.current_idx: int                 = 0
        self.final_path:  Tuple[NodeId, ...]  = ()
        self.delay:       float               = max(config.MIN_STEP_DELAY, delay)

        self._subscribers: List[Callable[[ViewState], None]] = []
        if on_change is not None:
            self._subscribers.append(on_change)

        # auto-advance bookkeeping
        self._pending:    Any = None
        self._generation: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Validate, regenerate the trace, and start auto-advancing."""
        if self.state not in (PlaybackState.IDLE, PlaybackState.FINISHED):
            return False
        if not self._begin_run():
            self._set_state(PlaybackState.IDLE)
            self._notify()
            return False
        self._set_state(PlaybackState.PLAYING)
        self._run()
        return True

    def reset(self, full_graph_reset: bool = False) -> None:
        """
        Back to IDLE with baseline view state.  The full variant also
        re-derives default endpoints (lowest / highest id).
        """
        self._cancel_pending()
        self.trace       = []
        self.current_idx = 0
        self.final_path  = ()
        self.graph.reset_view_state()
        if full_graph_reset:
            self.graph.default_endpoints()
        self._set_state(PlaybackState.IDLE)
        self._notify()

    def load_graph(self, graph: Graph) -> None:
        """Swap in a freshly built graph and fully reset."""
        self._cancel_pending()
        self.graph = graph
        logger.info("graph loaded: %s", graph)
        self.reset(full_graph_reset=True)

    def select_start(self, node_id: Any) -> None:
        self.graph.set_start(node_id)
        self.reset(full_graph_reset=False)

    def select_end(self, node_id: Any) -> None:
        self.graph.set_end(node_id)
        self.reset(full_graph_reset=False)

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        if self.state is not PlaybackState.PLAYING:
            return False
        self._cancel_pending()
        self._set_state(PlaybackState.PAUSED)
        self._notify()
        return True

    def resume(self) -> bool:
        if self.state is not PlaybackState.PAUSED:
            return False
        self._set_state(PlaybackState.PLAYING)
        self._run()
        return True

    def toggle_pause(self) -> bool:
        if self.state is PlaybackState.PLAYING:
            return self.pause()
        return self.resume()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Apply one step.  From IDLE this first validates and builds the trace."""
        if self.state in (PlaybackState.PLAYING, PlaybackState.FINISHED):
            return False
        if self.state is PlaybackState.IDLE:
            if not self._begin_run():
                self._notify()
                return False
            self._set_state(PlaybackState.PAUSED)
        self._advance()
        self._notify()
        return True

    def step_backward(self) -> bool:
        """Undo one step by replaying the trace from scratch up to index - 1."""
        if self.state in (PlaybackState.PLAYING, PlaybackState.IDLE) or self.current_idx == 0:
            return False
        if self.state is PlaybackState.FINISHED:
            self._set_state(PlaybackState.PAUSED)
        self.current_idx -= 1
        self._replay(self.current_idx)
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_delay(self, seconds: float) -> None:
        """Takes effect from the next scheduled step."""
        self.delay = max(config.MIN_STEP_DELAY, float(seconds))

    def set_speed(self, preset: str) -> None:
        self.set_delay(config.SPEED_PRESETS.get(preset, config.DEFAULT_STEP_DELAY))

    # ------------------------------------------------------------------
    # Subscriptions / read-only accessors
    # ------------------------------------------------------------------
    def subscribe(self, callback: Callable[[ViewState], None]) -> Callable[[], None]:
        """Register a view-state listener; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def view(self) -> ViewState:
        return ViewState(
            state=self.state,
            current_step_index=self.current_idx,
            total_steps=len(self.trace),
            nodes={
                nid: NodeView(node.distance, node.previous, node.visited)
                for nid, node in self.graph.nodes.items()
            },
            final_path=self.final_path,
            current_step=self.current_step,
            start_id=self.graph.start_id,
            end_id=self.graph.end_id,
        )

    @property
    def current_step(self) -> Optional[Step]:
        if 0 < self.current_idx <= len(self.trace):
            return self.trace[self.current_idx - 1]
        return None

    @property
    def is_finished(self) -> bool:
        return self.state is PlaybackState.FINISHED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _begin_run(self) -> bool:
        """Validate endpoints, wipe view state, build the trace.  False if empty."""
        if self.graph.start_node is None or self.graph.end_node is None:
            logger.warning("run rejected: start=%r end=%r", self.graph.start_id, self.graph.end_id)
            raise ValidationError("Please select a start and end node.")
        self._cancel_pending()
        self.current_idx = 0
        self.final_path  = ()
        self.graph.reset_view_state()
        self.trace = compute_trace(self.graph)
        return bool(self.trace)

    def _apply(self, step: Step) -> None:
        """The single step → view-state mapping, shared by forward and replay."""
        if isinstance(step, VisitStep):
            node = self.graph.get_node(step.node_id)
            if node is not None:
                node.mark_visited()
        elif isinstance(step, UpdateStep):
            node = self.graph.get_node(step.node_id)
            if node is not None and step.from_node_id in self.graph.nodes:
                node.record_update(step.new_distance, step.from_node_id)
        elif isinstance(step, PathStep):
            self.final_path = step.path

    def _advance(self) -> None:
        step = self.trace[self.current_idx]
        self._apply(step)
        self.current_idx += 1
        logger.debug("applied step %d/%d: %s", self.current_idx, len(self.trace), step.kind)
        if self.current_idx >= len(self.trace):
            self._cancel_pending()
            self._set_state(PlaybackState.FINISHED)

    def _replay(self, upto: int) -> None:
        self.graph.reset_view_state()
        self.final_path = ()
        for step in self.trace[:upto]:
            self._apply(step)

    def _run(self) -> None:
        """Start a new auto-advance generation and take its first step now."""
        self._cancel_pending()
        self._auto_step(self._generation)

    def _auto_step(self, generation: int) -> None:
        if generation != self._generation or self.state is not PlaybackState.PLAYING:
            return
        self._pending = None
        self._advance()
        self._notify()
        if self.state is PlaybackState.PLAYING:
            self._pending = self.scheduler.call_later(self.delay, lambda: self._auto_step(generation))

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None
        self._generation += 1

    def _set_state(self, new_state: PlaybackState) -> None:
        if new_state is not self.state:
            logger.info("playback %s → %s (step %d/%d)",
                        self.state.value, new_state.value, self.current_idx, len(self.trace))
        self.state = new_state

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.view()
        for callback in list(self._subscribers):
            callback(snapshot)
