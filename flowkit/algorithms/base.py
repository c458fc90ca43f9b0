"""Shared algorithm scaffolding: computation lifecycle and vertex colors."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Generic, TypeVar

from flowkit.events import Event
from flowkit.logging import get_logger

G = TypeVar("G")

logger = get_logger(__name__)


class ComputationState(IntEnum):
    """Lifecycle of an ``AlgorithmBase.compute()`` call."""

    NOT_RUNNING = 1
    RUNNING = 2
    FINISHED = 3
    #: The last computation raised; the exception was propagated to the caller.
    ABORTED = 4


class GraphColor(IntEnum):
    """Visitation state of a vertex during a graph search."""

    #: Not discovered yet.
    WHITE = 1
    #: Discovered and waiting in the frontier.
    GRAY = 2
    #: Dequeued, all out-edges examined.
    BLACK = 3


def require_not_none(value: Any, name: str) -> Any:
    """Return ``value``, raising TypeError when it is None."""
    if value is None:
        raise TypeError(f"{name} must not be None.")
    return value


class AlgorithmBase(Generic[G]):
    """Base class for algorithms operating on a caller-owned graph.

    ``compute()`` runs ``_initialize()``, ``_internal_compute()`` and
    ``_clean()`` in that order. ``_clean()`` always runs. When an exception
    escapes, the state becomes ``ABORTED``, ``aborted`` fires, and the
    exception propagates unchanged.

    Attributes:
        visited_graph: The graph the algorithm reads and possibly mutates.
        started, finished, aborted, state_changed: Events fired with the
            algorithm instance.
    """

    def __init__(self, visited_graph: G) -> None:
        self.visited_graph: G = require_not_none(visited_graph, "visited_graph")
        self._state = ComputationState.NOT_RUNNING

        self.started: Event[AlgorithmBase[G]] = Event("started")
        self.finished: Event[AlgorithmBase[G]] = Event("finished")
        self.aborted: Event[AlgorithmBase[G]] = Event("aborted")
        self.state_changed: Event[AlgorithmBase[G]] = Event("state_changed")

    @property
    def state(self) -> ComputationState:
        return self._state

    def _set_state(self, state: ComputationState) -> None:
        self._state = state
        self.state_changed.fire(self)

    def compute(self) -> None:
        """Run the algorithm to completion."""
        self._set_state(ComputationState.RUNNING)
        self.started.fire(self)
        try:
            self._initialize()
            try:
                self._internal_compute()
            finally:
                self._clean()
        except Exception:
            logger.debug("%s aborted", type(self).__name__)
            self._set_state(ComputationState.ABORTED)
            self.aborted.fire(self)
            raise
        self._set_state(ComputationState.FINISHED)
        self.finished.fire(self)

    def _initialize(self) -> None:
        """Prepare per-run state; called before ``_internal_compute``."""

    def _internal_compute(self) -> None:
        raise NotImplementedError

    def _clean(self) -> None:
        """Release per-run state; called even if the computation failed."""
