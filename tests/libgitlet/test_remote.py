from pathlib import Path

from libgitlet.constants import DEFAULT_BRANCH
from libgitlet.errors import AlreadyExists, NoSuchRemoteBranch, NotFastForwardable, NotFound
from libgitlet.merge import MergeOutcome
from libgitlet.objects import Commit, epoch_timestamp
from libgitlet.ref import HashRef
from libgitlet.remote import missing_commits, parents_first, tracking_branch
from libgitlet.repository import Repository
from pytest import fixture, raises


def _commit_file(repo: Repository, name: str, content: str, message: str) -> HashRef:
    (repo.working_dir / name).write_text(content)
    repo.add(name)
    return repo.commit(message)


@fixture
def origin(temp_repo: Repository, remote_repo: Repository) -> Repository:
    temp_repo.add_remote('origin', remote_repo.repo_path())
    return remote_repo


def test_independent_repositories_share_root(temp_repo: Repository, remote_repo: Repository) -> None:
    assert temp_repo.head_commit() == remote_repo.head_commit()


def test_add_and_remove_remote(temp_repo: Repository, remote_repo: Repository) -> None:
    temp_repo.add_remote('origin', remote_repo.repo_path())

    assert temp_repo.remotes() == {'origin': remote_repo.repo_path().as_posix()}

    with raises(AlreadyExists, match='A remote with that name already exists.'):
        temp_repo.add_remote('origin', remote_repo.repo_path())

    temp_repo.remove_remote('origin')
    assert temp_repo.remotes() == {}

    with raises(NotFound, match='A remote with that name does not exist.'):
        temp_repo.remove_remote('origin')


def test_add_remote_invalid_name_raises_error(temp_repo: Repository, remote_repo: Repository) -> None:
    with raises(ValueError):
        temp_repo.add_remote('', remote_repo.repo_path())

    with raises(ValueError):
        temp_repo.add_remote('a/b', remote_repo.repo_path())


def test_relative_remote_path(temp_repo: Repository, remote_repo: Repository) -> None:
    temp_repo.add_remote('origin', Path('..') / 'remote' / '.gitlet')

    remote = temp_repo.remote_repository('origin')

    assert remote.repo_path().resolve() == remote_repo.repo_path().resolve()


def test_missing_remote_directory_raises_error(temp_repo: Repository, tmp_path: Path) -> None:
    temp_repo.add_remote('ghost', tmp_path / 'nowhere' / '.gitlet')

    with raises(NotFound, match='Remote directory not found.'):
        temp_repo.push('ghost', DEFAULT_BRANCH)

    with raises(NotFound, match='Remote directory not found.'):
        temp_repo.fetch('unregistered', DEFAULT_BRANCH)


def test_push_fast_forwards_remote_branch(temp_repo: Repository, origin: Repository) -> None:
    _commit_file(temp_repo, 'a.txt', 'one', 'first')
    local_ref = _commit_file(temp_repo, 'a.txt', 'two', 'second')

    assert temp_repo.push('origin', DEFAULT_BRANCH) == local_ref

    assert origin.head_commit() == local_ref
    assert [entry.commit.message for entry in origin.log()] == ['second', 'first', 'initial commit']
    assert origin.load_blob(origin.load_commit(local_ref).file_table['a.txt']).contents == b'two'
    assert not (origin.working_dir / 'a.txt').exists()


def test_push_creates_missing_remote_branch(temp_repo: Repository, origin: Repository) -> None:
    local_ref = _commit_file(temp_repo, 'a.txt', 'one', 'first')

    temp_repo.push('origin', 'feature')

    assert origin.branch_head('feature') == local_ref
    assert origin.branches() == ['feature', DEFAULT_BRANCH]


def test_push_diverged_history_leaves_remote_untouched(temp_repo: Repository, origin: Repository) -> None:
    remote_ref = _commit_file(origin, 'r.txt', 'remote', 'remote work')
    local_ref = _commit_file(temp_repo, 'l.txt', 'local', 'local work')
    remote_commits = set(origin.commit_store().ids())
    remote_blobs = set(origin.blob_store().ids())

    with raises(NotFastForwardable, match='Please pull down remote changes before pushing.'):
        temp_repo.push('origin', DEFAULT_BRANCH)

    assert origin.head_commit() == remote_ref
    assert local_ref not in origin.commit_store()
    assert set(origin.commit_store().ids()) == remote_commits
    assert set(origin.blob_store().ids()) == remote_blobs


def test_fetch_creates_tracking_branch(temp_repo: Repository, origin: Repository) -> None:
    remote_ref = _commit_file(origin, 'r.txt', 'remote', 'remote work')

    branch = temp_repo.fetch('origin', DEFAULT_BRANCH)

    assert branch == tracking_branch('origin', DEFAULT_BRANCH) == 'origin/master'
    assert temp_repo.branch_head(branch) == remote_ref
    assert branch in temp_repo.branches()
    assert temp_repo.current_branch() == DEFAULT_BRANCH
    assert temp_repo.load_commit(remote_ref).message == 'remote work'


def test_fetch_advances_existing_tracking_branch(temp_repo: Repository, origin: Repository) -> None:
    first_ref = _commit_file(origin, 'r.txt', 'one', 'remote first')
    branch = temp_repo.fetch('origin', DEFAULT_BRANCH)
    second_ref = _commit_file(origin, 'r.txt', 'two', 'remote second')

    assert list(missing_commits(origin.stores(), temp_repo.stores(), second_ref)) == [second_ref]

    assert temp_repo.fetch('origin', DEFAULT_BRANCH) == branch
    assert temp_repo.branch_head(branch) == second_ref
    assert [entry.commit_ref for entry in temp_repo.log(branch)][:2] == [second_ref, first_ref]
    assert temp_repo.load_blob(temp_repo.load_commit(second_ref).file_table['r.txt']).contents == b'two'


def test_branch_named_after_fetched_remote_raises_error(temp_repo: Repository, origin: Repository) -> None:
    temp_repo.fetch('origin', DEFAULT_BRANCH)
    temp_repo.remove_remote('origin')

    with raises(AlreadyExists):
        temp_repo.add_branch('origin')

    assert temp_repo.branches() == [DEFAULT_BRANCH, 'origin/master']
    assert not any(path.name.startswith('.') for path in temp_repo.heads_dir().iterdir())


def test_branch_named_after_registered_remote_raises_error(temp_repo: Repository, origin: Repository) -> None:
    with raises(AlreadyExists):
        temp_repo.add_branch('origin')

    temp_repo.fetch('origin', DEFAULT_BRANCH)
    assert temp_repo.branches() == [DEFAULT_BRANCH, 'origin/master']


def test_remote_named_after_local_branch_raises_error(temp_repo: Repository, remote_repo: Repository) -> None:
    temp_repo.add_branch('origin')

    with raises(AlreadyExists):
        temp_repo.add_remote('origin', remote_repo.repo_path())

    assert temp_repo.remotes() == {}
    assert temp_repo.branches() == [DEFAULT_BRANCH, 'origin']


def test_fetch_missing_remote_branch_raises_error(temp_repo: Repository, origin: Repository) -> None:
    with raises(NoSuchRemoteBranch, match='That remote does not have that branch.'):
        temp_repo.fetch('origin', 'missing')


def test_pull_fast_forwards(temp_repo: Repository, origin: Repository) -> None:
    remote_ref = _commit_file(origin, 'r.txt', 'remote', 'remote work')

    result = temp_repo.pull('origin', DEFAULT_BRANCH)

    assert result.outcome == MergeOutcome.FAST_FORWARDED
    assert temp_repo.head_commit() == remote_ref
    assert (temp_repo.working_dir / 'r.txt').read_text() == 'remote'


def test_pull_merges_diverged_history(temp_repo: Repository, origin: Repository) -> None:
    remote_ref = _commit_file(origin, 'r.txt', 'remote', 'remote work')
    local_ref = _commit_file(temp_repo, 'l.txt', 'local', 'local work')

    result = temp_repo.pull('origin', DEFAULT_BRANCH)

    assert result.outcome == MergeOutcome.COMPLETED
    assert not result.conflict
    commit = temp_repo.load_commit(result.commit)
    assert commit.parents == (local_ref, remote_ref)
    assert commit.message == 'Merged origin/master into master.'
    assert set(commit.file_table) == {'l.txt', 'r.txt'}

    temp_repo.push('origin', DEFAULT_BRANCH)
    assert origin.head_commit() == result.commit


def test_parents_first_orders_merge_history() -> None:
    root = HashRef('0' * 40)
    left = HashRef('1' * 40)
    right = HashRef('2' * 40)
    merge = HashRef('3' * 40)
    commits = {
        merge: Commit('merge', epoch_timestamp(), left, right),
        right: Commit('right', epoch_timestamp(), root),
        left: Commit('left', epoch_timestamp(), root),
        root: Commit('root', epoch_timestamp()),
    }

    order = parents_first(commits)

    assert sorted(order) == sorted(commits)
    for commit_hash, commit in commits.items():
        for parent in commit.parents:
            assert order.index(parent) < order.index(commit_hash)
