"""Commit graph traversal: ancestor sets and merge split points.

All traversals use explicit worklists, so history depth never affects the call stack."""

from collections import deque
from collections.abc import Callable, Iterable

from loguru import logger

from .objects import Commit
from .ref import HashRef

type CommitLoader = Callable[[HashRef], Commit]


def ancestors(load: CommitLoader, start: HashRef) -> set[HashRef]:
    """Collect every commit reachable from ``start``, including ``start`` itself.

    The traversal is breadth-first and follows both the first parent and the merge parent.

    :param load: Function returning the commit stored under a hash.
    :param start: The commit to start from.
    :return: The set of reachable commit hashes."""
    seen: set[HashRef] = {start}
    frontier = deque([start])

    while frontier:
        commit = load(frontier.popleft())
        for parent in commit.parents:
            if parent not in seen:
                seen.add(parent)
                frontier.append(parent)

    return seen


def is_ancestor(load: CommitLoader, candidate: HashRef, descendant: HashRef) -> bool:
    """Check whether ``candidate`` is ``descendant`` or one of its ancestors."""
    return candidate in ancestors(load, descendant)


def breadth_first(load: CommitLoader, start: HashRef) -> Iterable[HashRef]:
    """Yield the commits reachable from ``start`` in breadth-first discovery order."""
    seen: set[HashRef] = {start}
    frontier = deque([start])

    while frontier:
        current = frontier.popleft()
        yield current

        for parent in load(current).parents:
            if parent not in seen:
                seen.add(parent)
                frontier.append(parent)


def split_point(load: CommitLoader, current: HashRef, other: HashRef) -> HashRef | None:
    """Find the commit to use as the base of a three-way merge.

    Expands the ancestors of ``current`` breadth-first and returns the first one that
    is also an ancestor of ``other``. With several merge bases (criss-cross history)
    this is the first base discovered, not necessarily the lowest one.

    :return: The split point, or None if the histories share no commit."""
    other_ancestors = ancestors(load, other)

    for candidate in breadth_first(load, current):
        if candidate in other_ancestors:
            logger.debug('Split point of {} and {} is {}', current[:7], other[:7], candidate[:7])
            return candidate

    return None
