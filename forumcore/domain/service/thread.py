"""Thread assembly and flattening.

Pure functions over reply records: no repositories, no I/O. The same code
serves the HTTP layer and any client that already holds a topic's replies.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional
from uuid import UUID

from forumcore.domain.error import StructuralInvariantError, ValidationError
from forumcore.domain.model.reply import Reply
from forumcore.domain.model.thread import FlatEntry, ThreadNode
from forumcore.domain.value import ReplyId, SortMode


def _oldest_key(node: ThreadNode) -> tuple:
    return (node.reply.created_at, node.reply.id)


def _most_voted_key(node: ThreadNode) -> tuple:
    # Earlier reply wins ties; id keeps the order total
    return (-node.score, node.reply.created_at, node.reply.id)


def _sort_siblings(siblings: list[ThreadNode], sort_mode: SortMode) -> None:
    if sort_mode == SortMode.OLDEST:
        siblings.sort(key=_oldest_key)
    elif sort_mode == SortMode.NEWEST:
        siblings.sort(key=_oldest_key, reverse=True)
    else:
        siblings.sort(key=_most_voted_key)


def assemble_thread(
    replies: Sequence[Reply],
    sort_mode: SortMode = SortMode.OLDEST,
    scores: Optional[Mapping[UUID, int]] = None,
) -> list[ThreadNode]:
    """Build the ordered reply forest of a topic.

    Algorithm:
    1. Wrap each reply in a node carrying its score (missing scores are 0)
    2. Group nodes by parent_reply_id (None = roots)
    3. Attach and sort every sibling group independently by sort_mode
    4. Verify every reply was reached from a root

    Args:
        replies: Flat replies of one topic, tombstones included
        sort_mode: Sibling ordering
        scores: Live score per reply ID

    Returns:
        Root nodes with children attached and sorted at every level

    Raises:
        StructuralInvariantError: A reply has a missing parent or sits on a
            parent cycle, so it cannot be reached from any root
    """
    scores = scores or {}
    nodes: dict[ReplyId, ThreadNode] = {
        reply.id: ThreadNode(reply=reply, score=scores.get(reply.id, 0))
        for reply in replies
    }
    if len(nodes) != len(replies):
        raise StructuralInvariantError("Duplicate reply IDs in thread input")

    groups: dict[Optional[ReplyId], list[ThreadNode]] = defaultdict(list)
    for node in nodes.values():
        groups[node.reply.parent_reply_id].append(node)

    for parent_id, siblings in groups.items():
        _sort_siblings(siblings, sort_mode)
        if parent_id is not None and parent_id in nodes:
            nodes[parent_id].children = siblings

    roots = groups.get(None, [])

    reached = count_nodes(roots)
    if reached != len(nodes):
        raise StructuralInvariantError(
            f"{len(nodes) - reached} replies are unreachable from the thread roots"
        )

    return roots


def count_nodes(forest: Iterable[ThreadNode]) -> int:
    """Number of nodes in a forest."""
    total = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.children)
    return total


def flatten_thread(forest: Sequence[ThreadNode], max_depth: int) -> list[FlatEntry]:
    """Project a forest onto a capped-depth, pre-order sequence.

    A node's level is min(depth, max_depth). Nodes deeper than the cap are
    kept at the cap instead of being dropped, so the result always has one
    entry per node and every parent precedes its descendants.

    Args:
        forest: Assembled root nodes
        max_depth: Deepest display level (0 puts everything at level 0)

    Returns:
        Flat entries in depth-first pre-order

    Raises:
        ValidationError: If max_depth is negative
    """
    if max_depth < 0:
        raise ValidationError(f"max_depth must be >= 0, got {max_depth}")

    flat: list[FlatEntry] = []
    # Explicit stack; thread depth is unbounded
    stack: list[tuple[ThreadNode, int]] = [(root, 0) for root in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        flat.append(FlatEntry(node=node, level=min(depth, max_depth)))
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return flat
