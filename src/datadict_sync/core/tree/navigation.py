"""Tree navigation: ancestor chains and active id resolution across reparses."""

from loguru import logger

from datadict_sync.models.node import DataDictionary

# (schema_id, index among siblings) for one step below the root.
StructuralStep = tuple[str, int]


def find_dictionary_id_parents(
    dictionary_id: str,
    data_dictionary: DataDictionary,
) -> tuple[str, ...]:
    """Get the ancestor chain of a node.

    Returns ids in order from the node itself up to the root (inclusive).
    """
    chain: list[str] = []
    current: str | None = dictionary_id
    while current is not None:
        chain.append(current)
        current = data_dictionary[current].parent_id
    return tuple(chain)


def get_structural_path(
    chain: tuple[str, ...],
    data_dictionary: DataDictionary,
) -> tuple[StructuralStep, ...]:
    """Convert an ancestor chain into root-first structural steps.

    Ids are not stable across a reparse, so each step is identified by the
    node's schema and its position among its siblings instead.
    """
    return tuple(
        (data_dictionary[node_id].schema_id, data_dictionary.index_in_parent(node_id))
        for node_id in reversed(chain[:-1])
    )


def find_updated_dictionary_id(
    chain: tuple[str, ...],
    previous: DataDictionary,
    data_dictionary: DataDictionary,
) -> str:
    """Find the id in a new dictionary matching an ancestor chain from the previous one.

    Walks the new tree from the root, following each structural step while
    a child exists at the same position with the same schema. Returns the
    deepest matched node, which is the new root when nothing below it matches.
    """
    current = data_dictionary.root
    for schema_id, index in get_structural_path(chain, previous):
        if index >= len(current.children):
            break
        candidate = data_dictionary[current.children[index]]
        if candidate.schema_id != schema_id:
            break
        current = candidate
    return current.id


def resolve_active_id(
    dictionary_id: str | None,
    previous: DataDictionary | None,
    data_dictionary: DataDictionary,
) -> str:
    """Resolve the previously active id against a freshly parsed dictionary."""
    if previous is None or dictionary_id is None or dictionary_id not in previous:
        logger.debug("No previous node for {!r}, falling back to root", dictionary_id)
        return data_dictionary.root_id

    resolved = find_updated_dictionary_id(
        find_dictionary_id_parents(dictionary_id, previous), previous, data_dictionary
    )
    logger.debug("Resolved active id {!r} -> {!r}", dictionary_id, resolved)
    return resolved
