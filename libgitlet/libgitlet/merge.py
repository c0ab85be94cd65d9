"""Merge helpers for libgitlet."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto

from merge3 import Merge3

from .config import ConflictStyle
from .constants import CONFLICT_END, CONFLICT_SEPARATOR, CONFLICT_START
from .objects import Commit
from .ref import HashRef


class MergeOutcome(StrEnum):
    """How a merge request was resolved."""

    NO_OP = auto()
    FAST_FORWARDED = auto()
    COMPLETED = auto()


class FileAction(Enum):
    """What a merge does with one file name."""

    KEEP = auto()
    TAKE_OTHER = auto()
    REMOVE = auto()
    CONFLICT = auto()


@dataclass(frozen=True)
class FileDecision:
    name: str
    action: FileAction
    base: HashRef | None
    current: HashRef | None
    other: HashRef | None


@dataclass
class MergeResult:
    """Represents the outcome of a branch merge."""

    outcome: MergeOutcome
    commit: HashRef
    message: str
    conflicts: list[str] = field(default_factory=list)

    @property
    def conflict(self) -> bool:
        return bool(self.conflicts)


def decide(base: HashRef | None, current: HashRef | None, other: HashRef | None) -> FileAction:
    """Decide what to do with one file given its blob in the split point, current and other commits.

    A None blob means the commit does not track the file."""
    if base is not None:
        current_unchanged = current == base
        other_unchanged = other == base

        if current_unchanged and not other_unchanged:
            return FileAction.REMOVE if other is None else FileAction.TAKE_OTHER
        if other_unchanged or current == other:
            return FileAction.KEEP
        return FileAction.CONFLICT

    if other is None or current == other:
        return FileAction.KEEP
    if current is None:
        return FileAction.TAKE_OTHER
    return FileAction.CONFLICT


def plan_merge(split: Commit, current: Commit, other: Commit) -> list[FileDecision]:
    """Apply :func:`decide` to every file tracked by any of the three commits.

    :return: The decisions, sorted by file name. KEEP decisions are included."""
    names = set(split.file_table) | set(current.file_table) | set(other.file_table)

    decisions: list[FileDecision] = []
    for name in sorted(names):
        base_blob = split.blob_for(name)
        current_blob = current.blob_for(name)
        other_blob = other.blob_for(name)
        decisions.append(FileDecision(name, decide(base_blob, current_blob, other_blob),
                                      base_blob, current_blob, other_blob))

    return decisions


def render_file_conflict(current: bytes, other: bytes) -> bytes:
    """Write both whole versions of a file into one conflict block."""
    return (CONFLICT_START.encode() + current + CONFLICT_SEPARATOR.encode() + other + CONFLICT_END.encode())


def _terminated(lines: Iterable[str]) -> list[str]:
    lines = list(lines)
    if lines and not lines[-1].endswith('\n'):
        lines[-1] += '\n'
    return lines


def render_line_conflict(base: bytes, current: bytes, other: bytes) -> tuple[bytes, bool]:
    """Merge three versions line by line, marking only the hunks both sides changed.

    :return: The merged content, and whether any conflicting hunk was marked."""
    base_lines = base.decode('utf-8', errors='surrogateescape').splitlines(keepends=True)
    current_lines = current.decode('utf-8', errors='surrogateescape').splitlines(keepends=True)
    other_lines = other.decode('utf-8', errors='surrogateescape').splitlines(keepends=True)

    merger = Merge3(base_lines, current_lines, other_lines)

    merged: list[str] = []
    conflicted = False
    for group in merger.merge_groups():
        match group:
            case ('unchanged' | 'same' | 'a' | 'b', lines):
                merged.extend(lines)
            case ('conflict', _, current_hunk, other_hunk):
                conflicted = True
                merged.append(CONFLICT_START)
                merged.extend(_terminated(current_hunk))
                merged.append(CONFLICT_SEPARATOR)
                merged.extend(_terminated(other_hunk))
                merged.append(CONFLICT_END)

    return ''.join(merged).encode('utf-8', errors='surrogateescape'), conflicted


def render_conflict(style: ConflictStyle, base: bytes, current: bytes, other: bytes) -> tuple[bytes, bool]:
    """Produce the working file content for a file both branches changed.

    :param style: ``file`` or ``lines``, see :class:`libgitlet.config.RepositoryConfig`.
    :param base: Split point content, empty if the split point lacks the file.
    :param current: Current branch content, empty if deleted there.
    :param other: Other branch content, empty if deleted there.
    :return: The content, and whether it holds conflict markers. The ``file`` style always does."""
    if style == 'lines':
        return render_line_conflict(base, current, other)
    return render_file_conflict(current, other), True


def merge_message(other_branch: str, current_branch: str) -> str:
    return f'Merged {other_branch} into {current_branch}.'
