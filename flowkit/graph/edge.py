"""Edge value types and factory aliases.

The flow algorithms never look inside an edge beyond its ``source`` and
``target`` attributes, so any object with those two attributes can be used.
The classes here cover the usual needs:

- ``Edge`` / ``TaggedEdge``: identity semantics; two edges between the same
  vertices are different edges.
- ``EquatableEdge`` / ``EquatableTaggedEdge``: value semantics on
  ``(source, target)``; the tag is payload and does not take part in
  equality or hashing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Hashable, Protocol, TypeVar

V = TypeVar("V", bound=Hashable)
E = TypeVar("E")

VertexFactory = Callable[[], Any]
EdgeFactory = Callable[[Any, Any], Any]
CapacityFunc = Callable[[Any], float]


class EdgeLike(Protocol):
    """Minimal edge protocol consumed by the graph and the algorithms."""

    @property
    def source(self) -> Any: ...

    @property
    def target(self) -> Any: ...


@dataclass(frozen=True, eq=False)
class Edge(Generic[V]):
    """Directed edge compared by identity."""

    source: V
    target: V

    def __str__(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass(frozen=True, eq=False)
class TaggedEdge(Edge[V]):
    """Directed edge compared by identity, carrying an arbitrary tag."""

    tag: Any = None

    def __str__(self) -> str:
        return f"{self.source}->{self.target}({self.tag})"


@dataclass(frozen=True)
class EquatableEdge(Edge[V]):
    """Directed edge equal to any other ``EquatableEdge`` with the same ends."""


@dataclass(frozen=True)
class EquatableTaggedEdge(EquatableEdge[V]):
    """``EquatableEdge`` with a tag that is ignored by equality."""

    tag: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.source}->{self.target}({self.tag})"


def is_self_edge(edge: EdgeLike) -> bool:
    """Return True if ``edge`` starts and ends at the same vertex."""
    return edge.source == edge.target
