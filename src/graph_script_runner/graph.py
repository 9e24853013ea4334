from __future__ import annotations

import itertools
import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Iterator, Protocol


@dataclass(slots=True)
class GraphElement:
    """Common shape of graph vertices and edges.

    Example:
        ```python
        element = Vertex(id=1, properties={"name": "ada"})
        ```
    """

    kind: ClassVar[str] = "element"

    id: Any
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Vertex(GraphElement):
    """A graph vertex.

    Example:
        ```python
        v = Vertex(id=1, properties={"name": "ada"})
        ```
    """

    kind: ClassVar[str] = "vertex"


@dataclass(slots=True)
class Edge(GraphElement):
    """A directed, labelled graph edge.

    Example:
        ```python
        e = Edge(id=7, properties={}, label="knows", out_id=1, in_id=2)
        ```
    """

    kind: ClassVar[str] = "edge"

    label: str = ""
    out_id: Any = None
    in_id: Any = None


class GraphStore(Protocol):
    """Host graph handle consumed by the script endpoint."""

    def vertices(self) -> Iterator[Vertex]:
        """Iterate all vertices.

        Example:
            ```python
            names = [v.properties["name"] for v in store.vertices()]
            ```
        """
        ...

    def edges(self) -> Iterator[Edge]:
        """Iterate all edges.

        Example:
            ```python
            labels = {e.label for e in store.edges()}
            ```
        """
        ...

    def get_vertex(self, vertex_id: Any) -> Vertex | None:
        """Return one vertex or None.

        Example:
            ```python
            v = store.get_vertex(1)
            ```
        """
        ...

    def get_edge(self, edge_id: Any) -> Edge | None:
        """Return one edge or None.

        Example:
            ```python
            e = store.get_edge(7)
            ```
        """
        ...

    def add_vertex(self, properties: dict[str, Any]) -> Vertex:
        """Create a vertex.

        Example:
            ```python
            v = store.add_vertex({"name": "ada"})
            ```
        """
        ...

    def add_edge(self, out_id: Any, in_id: Any, label: str, properties: dict[str, Any]) -> Edge:
        """Create an edge between two existing vertices.

        Example:
            ```python
            e = store.add_edge(1, 2, "knows", {})
            ```
        """
        ...

    def remove_vertex(self, vertex_id: Any) -> None:
        """Delete a vertex and its incident edges.

        Example:
            ```python
            store.remove_vertex(1)
            ```
        """
        ...

    def remove_edge(self, edge_id: Any) -> None:
        """Delete an edge.

        Example:
            ```python
            store.remove_edge(7)
            ```
        """
        ...


class InMemoryGraph:
    """Thread-safe in-process graph implementing `GraphStore`.

    Example:
        ```python
        graph = InMemoryGraph()
        ada = graph.add_vertex({"name": "ada"})
        ```
    """

    def __init__(self) -> None:
        """Initialize an empty graph.

        Example:
            ```python
            graph = InMemoryGraph()
            ```
        """
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._vertices: dict[Any, Vertex] = {}
        self._edges: dict[Any, Edge] = {}

    @classmethod
    def from_dict(cls, document: dict[str, Any]) -> "InMemoryGraph":
        """Build a graph from `{"vertices": [...], "edges": [...]}`.

        Vertex entries may carry an explicit `id`; edge entries name their
        endpoints with `out` and `in`.

        Example:
            ```python
            graph = InMemoryGraph.from_dict({"vertices": [{"id": 1}, {"id": 2}], "edges": [{"out": 1, "in": 2, "label": "knows"}]})
            ```
        """
        if not isinstance(document, dict):
            raise ValueError("Graph document must be a JSON object")
        graph = cls()
        for raw in document.get("vertices", []):
            entry = dict(raw)
            vertex_id = entry.pop("id", None)
            properties = dict(entry.pop("properties", {}), **entry)
            graph._insert_vertex(vertex_id, properties)
        for raw in document.get("edges", []):
            entry = dict(raw)
            try:
                out_id = entry.pop("out")
                in_id = entry.pop("in")
            except KeyError as exc:
                raise ValueError(f"Edge entry is missing {exc.args[0]!r}") from exc
            label = str(entry.pop("label", ""))
            edge_id = entry.pop("id", None)
            properties = dict(entry.pop("properties", {}), **entry)
            graph._insert_edge(edge_id, out_id, in_id, label, properties)
        return graph

    @classmethod
    def from_file(cls, path: str) -> "InMemoryGraph":
        """Load a graph from a JSON file.

        Example:
            ```python
            graph = InMemoryGraph.from_file("/tmp/graph.json")
            ```
        """
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    def vertices(self) -> Iterator[Vertex]:
        """Iterate over a snapshot of all vertices.

        Example:
            ```python
            count = sum(1 for _ in graph.vertices())
            ```
        """
        with self._lock:
            snapshot = list(self._vertices.values())
        return iter(snapshot)

    def edges(self) -> Iterator[Edge]:
        """Iterate over a snapshot of all edges.

        Example:
            ```python
            count = sum(1 for _ in graph.edges())
            ```
        """
        with self._lock:
            snapshot = list(self._edges.values())
        return iter(snapshot)

    def get_vertex(self, vertex_id: Any) -> Vertex | None:
        """Return the vertex with this id, if any.

        Example:
            ```python
            v = graph.get_vertex(1)
            ```
        """
        with self._lock:
            return self._vertices.get(vertex_id)

    def get_edge(self, edge_id: Any) -> Edge | None:
        """Return the edge with this id, if any.

        Example:
            ```python
            e = graph.get_edge(3)
            ```
        """
        with self._lock:
            return self._edges.get(edge_id)

    def add_vertex(self, properties: dict[str, Any]) -> Vertex:
        """Create a vertex with a generated id.

        Example:
            ```python
            v = graph.add_vertex({"name": "ada"})
            ```
        """
        return self._insert_vertex(None, dict(properties))

    def add_edge(self, out_id: Any, in_id: Any, label: str, properties: dict[str, Any]) -> Edge:
        """Create an edge with a generated id.

        Example:
            ```python
            e = graph.add_edge(1, 2, "knows", {"since": 1843})
            ```
        """
        return self._insert_edge(None, out_id, in_id, label, dict(properties))

    def remove_vertex(self, vertex_id: Any) -> None:
        """Remove a vertex together with its incident edges.

        Example:
            ```python
            graph.remove_vertex(1)
            ```
        """
        with self._lock:
            if self._vertices.pop(vertex_id, None) is None:
                raise KeyError(f"Vertex {vertex_id!r} does not exist")
            for edge_id, edge in list(self._edges.items()):
                if vertex_id in (edge.out_id, edge.in_id):
                    del self._edges[edge_id]

    def remove_edge(self, edge_id: Any) -> None:
        """Remove an edge.

        Example:
            ```python
            graph.remove_edge(3)
            ```
        """
        with self._lock:
            if self._edges.pop(edge_id, None) is None:
                raise KeyError(f"Edge {edge_id!r} does not exist")

    def _insert_vertex(self, vertex_id: Any, properties: dict[str, Any]) -> Vertex:
        """Store a vertex under an explicit or generated id.

        Example:
            ```python
            v = graph._insert_vertex(None, {"name": "ada"})
            ```
        """
        with self._lock:
            if vertex_id is None:
                vertex_id = self._next_id_locked()
            elif vertex_id in self._vertices:
                raise ValueError(f"Vertex {vertex_id!r} already exists")
            vertex = Vertex(id=vertex_id, properties=properties)
            self._vertices[vertex_id] = vertex
            return vertex

    def _insert_edge(
        self,
        edge_id: Any,
        out_id: Any,
        in_id: Any,
        label: str,
        properties: dict[str, Any],
    ) -> Edge:
        """Store an edge after checking both endpoints exist.

        Example:
            ```python
            e = graph._insert_edge(None, 1, 2, "knows", {})
            ```
        """
        with self._lock:
            for endpoint in (out_id, in_id):
                if endpoint not in self._vertices:
                    raise KeyError(f"Vertex {endpoint!r} does not exist")
            if edge_id is None:
                edge_id = self._next_id_locked()
            elif edge_id in self._edges:
                raise ValueError(f"Edge {edge_id!r} already exists")
            edge = Edge(id=edge_id, properties=properties, label=label, out_id=out_id, in_id=in_id)
            self._edges[edge_id] = edge
            return edge

    def _next_id_locked(self) -> int:
        """Return the next unused integer id shared by vertices and edges.

        Example:
            ```python
            new_id = graph._next_id_locked()
            ```
        """
        while True:
            candidate = next(self._ids)
            if candidate not in self._vertices and candidate not in self._edges:
                return candidate


class GraphAdapter:
    """Script-facing view of a graph handle, bound as `g`.

    Example:
        ```python
        g = GraphAdapter(InMemoryGraph())
        ada = g.add_vertex(name="ada")
        ```
    """

    def __init__(self, graph: GraphStore) -> None:
        """Wrap a graph handle.

        Example:
            ```python
            g = GraphAdapter(graph)
            ```
        """
        self._graph = graph

    def V(self) -> Iterator[Vertex]:
        """Lazily iterate all vertices.

        Example:
            ```python
            names = [v.properties["name"] for v in g.V()]
            ```
        """
        return self._graph.vertices()

    def E(self) -> Iterator[Edge]:
        """Lazily iterate all edges.

        Example:
            ```python
            labels = [e.label for e in g.E()]
            ```
        """
        return self._graph.edges()

    def v(self, vertex_id: Any) -> Vertex | None:
        """Look up one vertex.

        Example:
            ```python
            ada = g.v(1)
            ```
        """
        return self._graph.get_vertex(vertex_id)

    def e(self, edge_id: Any) -> Edge | None:
        """Look up one edge.

        Example:
            ```python
            knows = g.e(3)
            ```
        """
        return self._graph.get_edge(edge_id)

    def add_vertex(self, **properties: Any) -> Vertex:
        """Create a vertex from keyword properties.

        Example:
            ```python
            ada = g.add_vertex(name="ada")
            ```
        """
        return self._graph.add_vertex(properties)

    def add_edge(self, out_vertex: Any, in_vertex: Any, label: str, **properties: Any) -> Edge:
        """Create an edge; endpoints may be vertices or vertex ids.

        Example:
            ```python
            g.add_edge(ada, charles, "knows", since=1833)
            ```
        """
        return self._graph.add_edge(_vertex_id(out_vertex), _vertex_id(in_vertex), label, properties)

    def remove_vertex(self, vertex: Any) -> None:
        """Delete a vertex by object or id.

        Example:
            ```python
            g.remove_vertex(ada)
            ```
        """
        self._graph.remove_vertex(_vertex_id(vertex))

    def remove_edge(self, edge: Any) -> None:
        """Delete an edge by object or id.

        Example:
            ```python
            g.remove_edge(knows)
            ```
        """
        self._graph.remove_edge(edge.id if isinstance(edge, Edge) else edge)

    def out(self, vertex: Any, label: str | None = None) -> Iterator[Vertex]:
        """Lazily iterate vertices reached by outgoing edges.

        Example:
            ```python
            friends = list(g.out(ada, "knows"))
            ```
        """
        source = _vertex_id(vertex)
        for edge in self._graph.edges():
            if edge.out_id == source and (label is None or edge.label == label):
                target = self._graph.get_vertex(edge.in_id)
                if target is not None:
                    yield target

    def in_(self, vertex: Any, label: str | None = None) -> Iterator[Vertex]:
        """Lazily iterate vertices reaching this one through incoming edges.

        Example:
            ```python
            fans = list(g.in_(ada, "knows"))
            ```
        """
        target = _vertex_id(vertex)
        for edge in self._graph.edges():
            if edge.in_id == target and (label is None or edge.label == label):
                source = self._graph.get_vertex(edge.out_id)
                if source is not None:
                    yield source

    def __str__(self) -> str:
        """Summarize the wrapped graph.

        Example:
            ```python
            str(g)  # "graphadapter[vertices:2, edges:1]"
            ```
        """
        vertex_count = sum(1 for _ in self._graph.vertices())
        edge_count = sum(1 for _ in self._graph.edges())
        return f"graphadapter[vertices:{vertex_count}, edges:{edge_count}]"


def _vertex_id(vertex: Any) -> Any:
    """Accept a vertex object or a raw vertex id.

    Example:
        ```python
        vid = _vertex_id(Vertex(id=1))
        ```
    """
    return vertex.id if isinstance(vertex, Vertex) else vertex
