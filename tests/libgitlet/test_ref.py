from pathlib import Path

from libgitlet.ref import HashRef, RefError, SymRef, is_hash, read_ref, write_ref
from pytest import raises


def test_write_and_read_hash_ref(tmp_path: Path) -> None:
    ref_file = tmp_path / 'heads' / 'master'
    write_ref(ref_file, HashRef('ab' * 20))

    ref = read_ref(ref_file)
    assert isinstance(ref, HashRef)
    assert ref == 'ab' * 20


def test_write_and_read_symbolic_ref(tmp_path: Path) -> None:
    ref_file = tmp_path / 'HEAD'
    write_ref(ref_file, SymRef('heads/master'))

    assert ref_file.read_text() == 'ref: heads/master\n'
    ref = read_ref(ref_file)
    assert isinstance(ref, SymRef)
    assert ref == 'heads/master'


def test_read_invalid_ref_raises_error(tmp_path: Path) -> None:
    ref_file = tmp_path / 'master'
    ref_file.write_text('not a hash')

    with raises(RefError):
        read_ref(ref_file)

    with raises(RefError):
        read_ref(tmp_path / 'missing')


def test_write_plain_string_raises_error(tmp_path: Path) -> None:
    with raises(RefError):
        write_ref(tmp_path / 'master', 'ab' * 20)  # type: ignore[arg-type]


def test_is_hash() -> None:
    assert is_hash('0123456789abcdef' * 2 + '01234567')
    assert not is_hash('ABCDEF' * 6 + 'ABCD')
    assert not is_hash('abc')


def test_failed_write_leaves_no_temporary_file(tmp_path: Path) -> None:
    (tmp_path / 'heads' / 'origin').mkdir(parents=True)

    with raises(OSError):
        write_ref(tmp_path / 'heads' / 'origin', HashRef('ab' * 20))

    assert [path.name for path in (tmp_path / 'heads').iterdir()] == ['origin']
