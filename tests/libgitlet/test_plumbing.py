from pathlib import Path

from libgitlet.constants import HASH_LENGTH
from libgitlet.errors import CorruptObject, NotFound
from libgitlet.objects import Blob, Commit, epoch_timestamp
from libgitlet.plumbing import (ContentStore, copy_object, deserialize_blob, hash_bytes, hash_object, load_blob,
                                load_commit, save_blob, save_commit, serialize_blob)
from libgitlet.ref import HashRef
from pytest import raises


def test_put_then_get_returns_content(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'objects')
    content = b'some bytes\x00with a nul'

    object_id = store.put(content)

    assert len(object_id) == HASH_LENGTH
    assert store.get(object_id) == content


def test_put_is_deterministic_and_stores_once(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'objects')

    first = store.put(b'same')
    second = store.put(b'same')

    assert first == second == hash_bytes(b'same')
    assert list(store.ids()) == [first]
    assert store.path_for(first) == tmp_path / 'objects' / first[:2] / first


def test_get_missing_object_raises_not_found(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'objects')

    with raises(NotFound):
        store.get('a' * HASH_LENGTH)


def test_find_by_prefix(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'objects')
    ids = [store.put(f'content {i}'.encode()) for i in range(20)]

    target = ids[0]
    assert target in store.find(target[:6])
    assert store.find(target[:1]) == sorted(i for i in ids if i.startswith(target[:1]))
    assert store.find('zz') == []


def test_blob_identity_includes_name(tmp_path: Path) -> None:
    assert hash_object(Blob('a.txt', b'x')) != hash_object(Blob('b.txt', b'x'))
    assert hash_object(Blob('a.txt', b'x')) == hash_object(Blob('a.txt', b'x'))


def test_blob_round_trip(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'blobs')
    blob = Blob('binary.bin', b'\x00\x01\xffdata\x00')

    blob_ref = save_blob(store, blob)

    assert blob_ref == hash_object(blob)
    assert load_blob(store, blob_ref) == blob


def test_commit_round_trip(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'commits')
    root = Commit('initial commit', epoch_timestamp())
    root_ref = save_commit(store, root)
    child = Commit('second', 'Mon Jan 2 10:00:00 2023 +0000', root_ref, None, {'a.txt': HashRef('b' * 40)})

    child_ref = save_commit(store, child)

    assert load_commit(store, root_ref) == root
    assert load_commit(store, child_ref) == child
    assert load_commit(store, child_ref).parent == root_ref


def test_root_commit_is_the_same_everywhere() -> None:
    first = Commit('initial commit', epoch_timestamp())
    second = Commit('initial commit', epoch_timestamp())

    assert first.timestamp == 'Thu Jan 1 00:00:00 1970 +0000'
    assert hash_object(first) == hash_object(second)


def test_corrupted_objects_raise_corrupt_object(tmp_path: Path) -> None:
    store = ContentStore(tmp_path / 'commits')
    commit_ref = save_commit(store, Commit('initial commit', epoch_timestamp()))
    store.path_for(commit_ref).write_text('corrupted commit data')

    with raises(CorruptObject):
        load_commit(store, commit_ref)

    with raises(CorruptObject):
        deserialize_blob(b'commit\x00{}')


def test_copy_object_skips_existing(tmp_path: Path) -> None:
    source = ContentStore(tmp_path / 'source')
    target = ContentStore(tmp_path / 'target')
    object_id = source.put(serialize_blob(Blob('f', b'1')))

    assert copy_object(source, target, object_id) is True
    assert copy_object(source, target, object_id) is False
    assert target.get(object_id) == source.get(object_id)
