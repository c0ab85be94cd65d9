"""Per-repository configuration stored as JSON in the repository directory."""

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, get_args

from .errors import CorruptObject

type ConflictStyle = Literal['file', 'lines']

CONFLICT_STYLES: tuple[str, ...] = get_args(ConflictStyle.__value__)


@dataclass(frozen=True)
class RepositoryConfig:
    """Settings that change how a repository behaves.

    :param conflict_style: How merge conflicts are written to the working tree. ``file``
        writes both whole versions in one conflict block; ``lines`` merges line by line
        against the split point and marks only the conflicting hunks."""

    conflict_style: ConflictStyle = 'file'

    def __post_init__(self) -> None:
        if self.conflict_style not in CONFLICT_STYLES:
            msg = f'Invalid conflict style {self.conflict_style!r}, expected one of {", ".join(CONFLICT_STYLES)}'
            raise ValueError(msg)

    def replace(self, **changes: object) -> 'RepositoryConfig':
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            msg = f'Unknown configuration keys: {", ".join(sorted(unknown))}'
            raise ValueError(msg)
        return dataclasses.replace(self, **changes)


def load_config(config_file: Path) -> RepositoryConfig:
    """Load the configuration, falling back to defaults for a missing file or missing keys.

    :raises CorruptObject: If the file is not a JSON object of known settings."""
    if not config_file.exists():
        return RepositoryConfig()

    try:
        data = json.loads(config_file.read_text())
    except ValueError as e:
        msg = f'Malformed configuration in {config_file}'
        raise CorruptObject(msg) from e

    if not isinstance(data, dict):
        msg = f'Configuration in {config_file} must be a JSON object'
        raise CorruptObject(msg)

    try:
        return RepositoryConfig().replace(**data)
    except ValueError as e:
        msg = f'Invalid configuration in {config_file}'
        raise CorruptObject(msg) from e


def save_config(config_file: Path, config: RepositoryConfig) -> None:
    tmp_file = config_file.with_name(f'.{config_file.name}.tmp')
    tmp_file.write_text(json.dumps(dataclasses.asdict(config), indent=2, sort_keys=True))
    os.replace(tmp_file, config_file)
