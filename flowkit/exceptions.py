"""Exceptions raised by flowkit graphs and algorithms."""

from __future__ import annotations

from typing import Hashable, Optional


class FlowkitError(Exception):
    """Base class for all flowkit errors."""


class VertexNotFoundError(FlowkitError, LookupError):
    """A vertex required by an operation is not part of the graph."""

    def __init__(self, message: str, vertex: Optional[Hashable] = None) -> None:
        super().__init__(message)
        self.vertex = vertex


class NegativeCapacityError(FlowkitError, ValueError):
    """An edge capacity is negative."""

    def __init__(self, edge: object = None, capacity: Optional[float] = None) -> None:
        if edge is None:
            message = "Negative edge capacity."
        else:
            message = f"Negative capacity {capacity} on edge {edge}."
        super().__init__(message)
        self.edge = edge
        self.capacity = capacity


class InvalidOperationError(FlowkitError, RuntimeError):
    """A method was called while the object is in the wrong state."""
