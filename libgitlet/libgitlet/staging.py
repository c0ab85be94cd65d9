"""The staging area: pending additions and removals for the next commit."""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import CorruptObject
from .objects import Commit
from .ref import HashRef


@dataclass
class StagingArea:
    """Files to add to and remove from the next commit."""

    additions: dict[str, HashRef] = field(default_factory=dict)
    removals: set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def is_staged(self, name: str) -> bool:
        return name in self.additions or name in self.removals

    def stage_addition(self, name: str, blob_hash: HashRef) -> None:
        self.removals.discard(name)
        self.additions[name] = blob_hash

    def stage_removal(self, name: str) -> None:
        self.additions.pop(name, None)
        self.removals.add(name)

    def stage_snapshot(self, head: Commit, name: str, blob_hash: HashRef) -> None:
        """Record a fresh snapshot of ``name`` relative to the head commit.

        A file whose snapshot differs from the head's version is staged for addition.
        Re-adding a file identical to the head's version undoes a pending addition,
        or else a pending removal."""
        if head.blob_for(name) != blob_hash:
            self.stage_addition(name, blob_hash)
        elif name in self.additions:
            del self.additions[name]
        elif name in self.removals:
            self.removals.discard(name)

    def apply_to(self, file_table: Mapping[str, HashRef]) -> dict[str, HashRef]:
        """Build the file table of the next commit from its parent's table.

        :param file_table: The parent commit's file table. It is not modified.
        :return: A new mapping: the parent's entries minus removals, overlaid with additions."""
        result = {name: blob for name, blob in file_table.items() if name not in self.removals}
        result.update(self.additions)
        return result

    def to_dict(self) -> dict:
        return {'additions': dict(sorted(self.additions.items())), 'removals': sorted(self.removals)}

    @classmethod
    def from_dict(cls, data: dict) -> 'StagingArea':
        return cls(
            additions={name: HashRef(blob) for name, blob in data.get('additions', {}).items()},
            removals=set(data.get('removals', [])),
        )


def load_staging_area(index_file: Path) -> StagingArea:
    """Load the staging area, treating a missing index as empty.

    :raises CorruptObject: If the index cannot be decoded."""
    if not index_file.exists():
        return StagingArea()

    try:
        return StagingArea.from_dict(json.loads(index_file.read_text()))
    except (ValueError, AttributeError, TypeError) as e:
        msg = f'Malformed staging area in {index_file}'
        raise CorruptObject(msg) from e


def save_staging_area(index_file: Path, area: StagingArea) -> None:
    tmp_file = index_file.with_name(f'.{index_file.name}.tmp')
    tmp_file.write_text(json.dumps(area.to_dict(), indent=2))
    os.replace(tmp_file, index_file)
