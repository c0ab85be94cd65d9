"""Low-level object storage: hashing, canonical encoding and the content store."""

import hashlib
import json
import os
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from .errors import CorruptObject, NotFound
from .objects import Blob, Commit
from .ref import HashRef, is_hash

BLOB_TAG = b'blob'
COMMIT_TAG = b'commit'
SEPARATOR = b'\0'


def hash_bytes(data: bytes) -> HashRef:
    """Compute the hash that identifies ``data`` in a content store."""
    return HashRef(hashlib.sha1(data).hexdigest())


def _canonical_json(data: dict) -> bytes:
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def serialize_blob(blob: Blob) -> bytes:
    """Encode a blob canonically. The file name is part of the blob's identity."""
    return BLOB_TAG + SEPARATOR + _canonical_json({'name': blob.name}) + SEPARATOR + blob.contents


def serialize_commit(commit: Commit) -> bytes:
    """Encode a commit canonically."""
    return COMMIT_TAG + SEPARATOR + _canonical_json({
        'message': commit.message,
        'timestamp': commit.timestamp,
        'parent': commit.parent,
        'merge_parent': commit.merge_parent,
        'file_table': dict(commit.file_table),
    })


def deserialize_blob(data: bytes) -> Blob:
    """Decode bytes produced by :func:`serialize_blob`.

    :raises CorruptObject: If the data is not an encoded blob."""
    try:
        tag, header, contents = data.split(SEPARATOR, 2)
        if tag != BLOB_TAG:
            msg = f'Expected a blob, found {tag!r}'
            raise ValueError(msg)
        name = json.loads(header)['name']
    except (ValueError, KeyError, TypeError) as e:
        msg = 'Malformed blob object'
        raise CorruptObject(msg) from e

    return Blob(name, contents)


def deserialize_commit(data: bytes) -> Commit:
    """Decode bytes produced by :func:`serialize_commit`.

    :raises CorruptObject: If the data is not an encoded commit."""
    try:
        tag, body = data.split(SEPARATOR, 1)
        if tag != COMMIT_TAG:
            msg = f'Expected a commit, found {tag!r}'
            raise ValueError(msg)
        fields = json.loads(body)
        parent = fields['parent']
        merge_parent = fields['merge_parent']
        return Commit(
            message=fields['message'],
            timestamp=fields['timestamp'],
            parent=HashRef(parent) if parent else None,
            merge_parent=HashRef(merge_parent) if merge_parent else None,
            file_table={name: HashRef(blob) for name, blob in fields['file_table'].items()},
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        msg = 'Malformed commit object'
        raise CorruptObject(msg) from e


def hash_object(obj: Blob | Commit) -> HashRef:
    """Compute the identity of a blob or commit."""
    match obj:
        case Blob():
            return hash_bytes(serialize_blob(obj))
        case Commit():
            return hash_bytes(serialize_commit(obj))
        case _:
            msg = f'Cannot hash object of type {type(obj)}'
            raise TypeError(msg)


class ContentStore:
    """An append-only store mapping content hashes to byte content.

    Each distinct content is written exactly once, to ``<root>/<hash[:2]>/<hash>``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, object_id: str) -> Path:
        return self.root / object_id[:2] / object_id

    def __contains__(self, object_id: object) -> bool:
        return isinstance(object_id, str) and is_hash(object_id) and self.path_for(object_id).is_file()

    def put(self, data: bytes) -> HashRef:
        """Store ``data`` and return its hash. Storing known content is a no-op.

        :param data: The content to store.
        :return: The hash identifying the content."""
        object_id = hash_bytes(data)
        path = self.path_for(object_id)
        if path.exists():
            return object_id

        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f'.{object_id}.tmp')
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
        logger.debug('Stored object {} in {}', object_id, self.root.name)

        return object_id

    def get(self, object_id: str) -> bytes:
        """Return the content stored under ``object_id``.

        :raises NotFound: If nothing is stored under that hash."""
        if object_id not in self:
            msg = f'No object with id {object_id} exists.'
            raise NotFound(msg)

        return self.path_for(object_id).read_bytes()

    def ids(self) -> Iterator[HashRef]:
        """Iterate over every stored hash, in sorted order."""
        if not self.root.is_dir():
            return
        for fan_out in sorted(self.root.iterdir()):
            if not fan_out.is_dir():
                continue
            for object_file in sorted(fan_out.iterdir()):
                if is_hash(object_file.name):
                    yield HashRef(object_file.name)

    def find(self, prefix: str) -> list[HashRef]:
        """Return every stored hash starting with ``prefix``."""
        prefix = prefix.lower()
        if len(prefix) >= 2:
            fan_out = self.root / prefix[:2]
            if not fan_out.is_dir():
                return []
            return sorted(HashRef(f.name) for f in fan_out.iterdir() if is_hash(f.name) and f.name.startswith(prefix))

        return [object_id for object_id in self.ids() if object_id.startswith(prefix)]


def save_blob(store: ContentStore, blob: Blob) -> HashRef:
    return store.put(serialize_blob(blob))


def load_blob(store: ContentStore, blob_hash: str) -> Blob:
    return deserialize_blob(store.get(blob_hash))


def save_commit(store: ContentStore, commit: Commit) -> HashRef:
    return store.put(serialize_commit(commit))


def load_commit(store: ContentStore, commit_hash: str) -> Commit:
    return deserialize_commit(store.get(commit_hash))


def copy_object(source: ContentStore, target: ContentStore, object_id: str) -> bool:
    """Copy one object between stores.

    :return: True if the object was copied, False if the target already had it."""
    if object_id in target:
        return False

    target.put(source.get(object_id))
    return True
