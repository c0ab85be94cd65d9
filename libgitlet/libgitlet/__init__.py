"""libgitlet: a small local version-control engine."""

from .config import RepositoryConfig
from .errors import (AlreadyExists, AmbiguousId, CorruptObject, EmptyMessage, IsCurrentBranch, NoSuchBranch,
                     NoSuchRemoteBranch, NotFastForwardable, NotFound, NothingToCommit, NothingToRemove,
                     RepositoryError, RepositoryNotFoundError, UncommittedChanges, UntrackedObstruction)
from .merge import MergeOutcome, MergeResult
from .objects import Blob, Commit
from .ref import HashRef, RefError, SymRef
from .repository import LogEntry, Repository, Status

__all__ = [
    'AlreadyExists',
    'AmbiguousId',
    'Blob',
    'Commit',
    'CorruptObject',
    'EmptyMessage',
    'HashRef',
    'IsCurrentBranch',
    'LogEntry',
    'MergeOutcome',
    'MergeResult',
    'NoSuchBranch',
    'NoSuchRemoteBranch',
    'NotFastForwardable',
    'NotFound',
    'NothingToCommit',
    'NothingToRemove',
    'RefError',
    'Repository',
    'RepositoryConfig',
    'RepositoryError',
    'RepositoryNotFoundError',
    'Status',
    'SymRef',
    'UncommittedChanges',
    'UntrackedObstruction',
]
