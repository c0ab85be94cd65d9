"""Immutable objects stored in a libgitlet repository."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from .constants import TIMESTAMP_FORMAT
from .ref import HashRef


def format_timestamp(moment: datetime) -> str:
    """Format a moment the way commits record it, e.g. ``Thu Jan 1 00:00:00 1970 +0000``."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.strftime(TIMESTAMP_FORMAT.format(day=moment.day))


def epoch_timestamp() -> str:
    """Timestamp of the root commit."""
    return format_timestamp(datetime.fromtimestamp(0, UTC))


def current_timestamp() -> str:
    return format_timestamp(datetime.now().astimezone())


@dataclass(frozen=True)
class Blob:
    """A snapshot of one file's content at the time it was staged."""

    name: str
    contents: bytes


@dataclass(frozen=True)
class Commit:
    """A snapshot of the whole tracked file set plus its lineage.

    ``file_table`` maps file names to blob hashes. It is never mutated after the
    commit is constructed; new commits always receive a freshly built mapping."""

    message: str
    timestamp: str
    parent: HashRef | None = None
    merge_parent: HashRef | None = None
    file_table: dict[str, HashRef] = field(default_factory=dict)

    @property
    def parents(self) -> tuple[HashRef, ...]:
        """Parent hashes, first parent first."""
        return tuple(p for p in (self.parent, self.merge_parent) if p is not None)

    @property
    def is_merge(self) -> bool:
        return self.merge_parent is not None

    def tracks(self, name: str) -> bool:
        return name in self.file_table

    def blob_for(self, name: str) -> HashRef | None:
        return self.file_table.get(name)
