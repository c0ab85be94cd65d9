"""References: commit hashes and symbolic names stored in ref files."""

import os
from pathlib import Path

from .constants import HASH_CHARSET, HASH_LENGTH

SYMREF_PREFIX = 'ref: '


class RefError(Exception):
    """Exception raised for malformed or unreadable references."""


class HashRef(str):
    """A full commit or blob hash."""


class SymRef(str):
    """A symbolic reference, relative to the refs directory (e.g. ``heads/master``)."""


type Ref = HashRef | SymRef


def is_hash(value: str) -> bool:
    """Check whether a string looks like a full object hash."""
    return len(value) == HASH_LENGTH and all(c in HASH_CHARSET for c in value)


def read_ref(ref_file: Path) -> Ref:
    """Read a reference from a ref file.

    :param ref_file: The file holding the reference.
    :return: A SymRef when the file holds ``ref: <name>``, otherwise a HashRef.
    :raises RefError: If the file cannot be read or holds an invalid value."""
    try:
        content = ref_file.read_text().strip()
    except OSError as e:
        msg = f'Cannot read reference from {ref_file}'
        raise RefError(msg) from e

    if content.startswith(SYMREF_PREFIX):
        return SymRef(content.removeprefix(SYMREF_PREFIX))
    if is_hash(content):
        return HashRef(content)

    msg = f'Invalid reference in {ref_file}: {content!r}'
    raise RefError(msg)


def write_ref(ref_file: Path, ref: Ref) -> None:
    """Write a reference to a ref file, replacing any previous value atomically.

    :param ref_file: The file to write.
    :param ref: The reference to store."""
    match ref:
        case SymRef():
            content = f'{SYMREF_PREFIX}{ref}'
        case HashRef():
            content = str(ref)
        case _:
            msg = f'Invalid reference type: {type(ref)}'
            raise RefError(msg)

    ref_file.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = ref_file.with_name(f'.{ref_file.name}.tmp')
    tmp_file.write_text(content + '\n')
    try:
        os.replace(tmp_file, ref_file)
    except OSError:
        tmp_file.unlink(missing_ok=True)
        raise
