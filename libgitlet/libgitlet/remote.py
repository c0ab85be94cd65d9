"""Copying history between two repositories on the local file system."""

import json
import os
from collections import deque
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .errors import CorruptObject
from .objects import Commit
from .plumbing import ContentStore, copy_object, load_commit
from .ref import HashRef


@dataclass(frozen=True)
class ObjectStores:
    """The commit and blob stores of one repository."""

    commits: ContentStore
    blobs: ContentStore


@dataclass(frozen=True)
class TransferStats:
    commits: int
    blobs: int


def missing_commits(source: ObjectStores, target: ObjectStores, head: HashRef) -> dict[HashRef, Commit]:
    """Collect the commits reachable from ``head`` that ``target`` does not hold.

    Traversal stops at commits the target already holds, since their history is already present."""
    missing: dict[HashRef, Commit] = {}
    seen: set[HashRef] = {head}
    frontier = deque([head])

    while frontier:
        commit_hash = frontier.popleft()
        if commit_hash in target.commits:
            continue

        commit = load_commit(source.commits, commit_hash)
        missing[commit_hash] = commit
        for parent in commit.parents:
            if parent not in seen:
                seen.add(parent)
                frontier.append(parent)

    return missing


def parents_first(commits: dict[HashRef, Commit]) -> list[HashRef]:
    """Order commits so that every commit comes after those of its parents in ``commits``."""
    order: list[HashRef] = []
    visited: set[HashRef] = set()

    for root in commits:
        stack = [(root, False)]
        while stack:
            commit_hash, expanded = stack.pop()
            if expanded:
                order.append(commit_hash)
                continue
            if commit_hash in visited:
                continue

            visited.add(commit_hash)
            stack.append((commit_hash, True))
            stack.extend((parent, False) for parent in commits[commit_hash].parents
                         if parent in commits and parent not in visited)

    return order


def copy_history(source: ObjectStores, target: ObjectStores, head: HashRef) -> TransferStats:
    """Copy every commit reachable from ``head``, and the blobs they track, into ``target``.

    Objects are written parents first and blobs before the commit that references them,
    so a commit present in the target always has its whole history present too.

    :return: How many commits and blobs were copied."""
    missing = missing_commits(source, target, head)

    copied_blobs = 0
    for commit_hash in parents_first(missing):
        for blob_hash in missing[commit_hash].file_table.values():
            if copy_object(source.blobs, target.blobs, blob_hash):
                copied_blobs += 1
        copy_object(source.commits, target.commits, commit_hash)

    logger.debug('Copied {} commits and {} blobs up to {}', len(missing), copied_blobs, head[:7])
    return TransferStats(len(missing), copied_blobs)


def tracking_branch(remote: str, branch: str) -> str:
    """Name of the local branch that mirrors ``branch`` of ``remote``."""
    return f'{remote}/{branch}'


def load_remotes(remotes_file: Path) -> dict[str, str]:
    """Load the remote name to path table, empty if none was saved yet."""
    if not remotes_file.exists():
        return {}

    try:
        remotes = json.loads(remotes_file.read_text())
    except ValueError as e:
        msg = f'Malformed remote table in {remotes_file}'
        raise CorruptObject(msg) from e

    if not isinstance(remotes, dict):
        msg = f'Malformed remote table in {remotes_file}'
        raise CorruptObject(msg)
    return {str(name): str(path) for name, path in remotes.items()}


def save_remotes(remotes_file: Path, remotes: dict[str, str]) -> None:
    tmp_file = remotes_file.with_name(f'.{remotes_file.name}.tmp')
    tmp_file.write_text(json.dumps(dict(sorted(remotes.items())), indent=2))
    os.replace(tmp_file, remotes_file)
