"""Domain models for the data dictionary."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Node:
    """A single node in a data dictionary tree."""

    id: str
    schema_id: str
    parent_id: str | None = None
    children: tuple[str, ...] = ()
    attributes: Mapping[str, str | None] = field(default_factory=dict)
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "schema_id": self.schema_id}
        if self.children:
            data["children"] = list(self.children)
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        if self.text:
            data["text"] = self.text
        return data


@dataclass(frozen=True)
class DataDictionary:
    """An immutable tree of nodes keyed by id, with a designated root."""

    nodes: Mapping[str, Node]
    root_id: str

    def __getitem__(self, dictionary_id: str) -> Node:
        return self.nodes[dictionary_id]

    def __contains__(self, dictionary_id: object) -> bool:
        return dictionary_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, dictionary_id: str) -> Node | None:
        return self.nodes.get(dictionary_id)

    @property
    def root(self) -> Node:
        return self.nodes[self.root_id]

    def children_of(self, dictionary_id: str) -> tuple[Node, ...]:
        """Direct children of a node, in document order."""
        return tuple(self.nodes[child_id] for child_id in self.nodes[dictionary_id].children)

    def index_in_parent(self, dictionary_id: str) -> int:
        """Position of a node among its siblings (0 for the root)."""
        node = self.nodes[dictionary_id]
        if node.parent_id is None:
            return 0
        return self.nodes[node.parent_id].children.index(dictionary_id)

    def walk(self, dictionary_id: str | None = None) -> Iterator[Node]:
        """Traverse depth-first, yielding a node before its children."""
        stack = [dictionary_id or self.root_id]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_id": self.root_id,
            "nodes": [node.to_dict() for node in self.walk()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataDictionary":
        """Build a dictionary from its JSON form, checking the tree invariants.

        Parent ids are derived from the children lists, so a node listed
        under two parents, a child id with no node, a node unreachable from
        the root or a cycle raises ValueError.
        """
        raw_nodes = {n["id"]: n for n in data["nodes"]}
        root_id = data["root_id"]
        if root_id not in raw_nodes:
            msg = f"Root node {root_id!r} is missing"
            raise ValueError(msg)

        parents: dict[str, str | None] = {root_id: None}
        for raw in data["nodes"]:
            for child_id in raw.get("children", []):
                if child_id not in raw_nodes:
                    msg = f"Node {raw['id']!r} references unknown child {child_id!r}"
                    raise ValueError(msg)
                if child_id in parents:
                    msg = f"Node {child_id!r} has more than one parent"
                    raise ValueError(msg)
                parents[child_id] = raw["id"]

        if set(parents) != set(raw_nodes):
            msg = f"Orphaned nodes: {sorted(set(raw_nodes) - set(parents))!r}"
            raise ValueError(msg)

        nodes = {
            node_id: Node(
                id=node_id,
                schema_id=raw["schema_id"],
                parent_id=parents[node_id],
                children=tuple(raw.get("children", [])),
                attributes=dict(raw.get("attributes", {})),
                text=raw.get("text", ""),
            )
            for node_id, raw in raw_nodes.items()
        }
        dictionary = cls(nodes=nodes, root_id=root_id)

        # Every node has exactly one parent, so a short walk means a cycle.
        seen = sum(1 for _ in dictionary.walk())
        if seen != len(nodes):
            msg = "Data dictionary contains a cycle"
            raise ValueError(msg)
        return dictionary


@dataclass(frozen=True)
class Schema:
    """Shape of one node type: allowed attributes and child types."""

    id: str
    attributes: frozenset[str] | None = None
    children: frozenset[str] | None = None
    void: bool = False

    def allows_attribute(self, name: str) -> bool:
        return self.attributes is None or name in self.attributes

    def allows_child(self, schema_id: str) -> bool:
        return self.children is None or schema_id in self.children

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schema":
        attributes = data.get("attributes")
        children = data.get("children")
        return cls(
            id=data["id"],
            attributes=frozenset(attributes) if attributes is not None else None,
            children=frozenset(children) if children is not None else None,
            void=bool(data.get("void", False)),
        )


SchemaDictionary = Mapping[str, Schema]


def schema_dictionary_from_dict(data: dict[str, Any]) -> dict[str, Schema]:
    """Read a schema dictionary from its JSON form (schema id -> shape)."""
    return {
        schema_id: Schema.from_dict({"id": schema_id, **raw}) for schema_id, raw in data.items()
    }


@dataclass(frozen=True)
class Position:
    """A 1-based line/column location in the text."""

    line_number: int
    column: int
