"""libgitlet repository management."""

from collections.abc import Callable, Generator
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Concatenate

from loguru import logger

from . import graph
from .config import RepositoryConfig, load_config, save_config
from .constants import (BLOBS_SUBDIR, COMMITS_SUBDIR, CONFIG_FILE, DEFAULT_BRANCH, DEFAULT_REPO_DIR, HASH_CHARSET,
                        HEAD_FILE, HEADS_DIR, INDEX_FILE, INITIAL_COMMIT_MESSAGE, OBJECTS_SUBDIR, REFS_DIR,
                        REMOTES_FILE)
from .errors import (AlreadyExists, AmbiguousId, EmptyMessage, IsCurrentBranch, NoSuchBranch, NoSuchRemoteBranch,
                     NotFastForwardable, NotFound, NothingToCommit, NothingToRemove, RepositoryError,
                     RepositoryNotFoundError, UncommittedChanges, UntrackedObstruction)
from .merge import FileAction, MergeOutcome, MergeResult, merge_message, plan_merge, render_conflict
from .objects import Blob, Commit, current_timestamp, epoch_timestamp
from .plumbing import ContentStore, hash_object, load_blob, load_commit, save_blob, save_commit
from .ref import HashRef, RefError, SymRef, read_ref, write_ref
from .remote import ObjectStores, copy_history, load_remotes, save_remotes, tracking_branch
from .staging import StagingArea, load_staging_area, save_staging_area
from .working_tree import WorkingTree

UNTRACKED_IN_THE_WAY = 'There is an untracked file in the way; delete it, or add and commit it first.'


@dataclass
class LogEntry:
    """A class representing a log entry for a branch or commit history."""

    commit_ref: HashRef
    commit: Commit


@dataclass
class Status:
    """A snapshot of the branch table, the staging area and the working tree."""

    current_branch: str
    branches: list[str]
    staged: list[str]
    removed: list[str]
    modified: list[str]
    untracked: list[str]


class Repository:
    """Represents a libgitlet repository.

    This class provides methods to initialize a repository, stage and commit files,
    manage branches, merge them and exchange history with other repositories."""

    def __init__(self, working_dir: Path | str, repo_dir: Path | str | None = None) -> None:
        """Initialize a Repository instance. The repository is not created on disk until `init()` is called.

        :param working_dir: The working directory where the repository will be located.
        :param repo_dir: The name of the repository directory within the working directory. Defaults to '.gitlet'."""
        self.working_dir = Path(working_dir)

        if repo_dir is None:
            self.repo_dir = Path(DEFAULT_REPO_DIR)
        else:
            self.repo_dir = Path(repo_dir)

    def init(self, default_branch: str = DEFAULT_BRANCH) -> HashRef:
        """Initialize a new repository in the working directory.

        Every repository starts from the same root commit, so independently created
        repositories can exchange history.

        :param default_branch: The name of the branch to create and check out. Defaults to 'master'.
        :return: The hash of the root commit.
        :raises AlreadyExists: If the repository already exists."""
        if self.exists():
            msg = 'A Gitlet version-control system already exists in the current directory.'
            raise AlreadyExists(msg)

        self.repo_path().mkdir(parents=True)
        self.commits_dir().mkdir(parents=True)
        self.blobs_dir().mkdir(parents=True)
        self.heads_dir().mkdir(parents=True)

        root_ref = save_commit(self.commit_store(), Commit(INITIAL_COMMIT_MESSAGE, epoch_timestamp()))
        write_ref(self.heads_dir() / default_branch, root_ref)
        write_ref(self.head_file(), branch_ref(default_branch))
        save_staging_area(self.index_file(), StagingArea())
        save_remotes(self.remotes_file(), {})
        save_config(self.config_file(), RepositoryConfig())

        logger.info('Initialized repository at {} on branch {}', self.repo_path(), default_branch)
        return root_ref

    def exists(self) -> bool:
        """Check if the repository exists in the working directory.

        :return: True if the repository exists, False otherwise."""
        return self.repo_path().exists()

    def repo_path(self) -> Path:
        """Get the path to the repository directory.

        :return: The path to the repository directory."""
        return self.working_dir / self.repo_dir

    def objects_dir(self) -> Path:
        return self.repo_path() / OBJECTS_SUBDIR

    def commits_dir(self) -> Path:
        return self.objects_dir() / COMMITS_SUBDIR

    def blobs_dir(self) -> Path:
        return self.objects_dir() / BLOBS_SUBDIR

    def refs_dir(self) -> Path:
        return self.repo_path() / REFS_DIR

    def heads_dir(self) -> Path:
        """Get the path to the branch heads directory within the repository.

        Tracking branches of a remote live in a subdirectory named after the remote."""
        return self.refs_dir() / HEADS_DIR

    def head_file(self) -> Path:
        return self.repo_path() / HEAD_FILE

    def index_file(self) -> Path:
        return self.repo_path() / INDEX_FILE

    def remotes_file(self) -> Path:
        return self.repo_path() / REMOTES_FILE

    def config_file(self) -> Path:
        return self.repo_path() / CONFIG_FILE

    def commit_store(self) -> ContentStore:
        return ContentStore(self.commits_dir())

    def blob_store(self) -> ContentStore:
        return ContentStore(self.blobs_dir())

    def stores(self) -> ObjectStores:
        return ObjectStores(self.commit_store(), self.blob_store())

    def working_tree(self) -> WorkingTree:
        return WorkingTree(self.working_dir, frozenset({self.repo_dir.name}))

    @staticmethod
    def requires_repo[**P, R](func: Callable[Concatenate['Repository', P], R]) -> \
            Callable[Concatenate['Repository', P], R]:
        """Decorate a Repository method to ensure that the repository exists before executing the method.

        :param func: The method to decorate.
        :return: A wrapper function that checks for the repository's existence."""

        @wraps(func)
        def _verify_repo(self: 'Repository', *args: P.args, **kwargs: P.kwargs) -> R:
            if not self.exists():
                msg = 'Not in an initialized Gitlet directory.'
                raise RepositoryNotFoundError(msg)

            return func(self, *args, **kwargs)

        return _verify_repo

    # Objects

    @requires_repo
    def load_commit(self, commit_ref: HashRef) -> Commit:
        """Load a commit by its full hash.

        :raises NotFound: If no such commit is stored.
        :raises CorruptObject: If the stored commit cannot be decoded."""
        return load_commit(self.commit_store(), commit_ref)

    @requires_repo
    def load_blob(self, blob_ref: HashRef) -> Blob:
        return load_blob(self.blob_store(), blob_ref)

    @requires_repo
    def snapshot(self, name: str) -> HashRef:
        """Save the current content of a working file as a blob.

        :param name: The name of the file in the working directory.
        :return: The hash of the saved blob.
        :raises NotFound: If the file does not exist."""
        tree = self.working_tree()
        if not tree.exists(name):
            msg = 'File does not exist.'
            raise NotFound(msg)

        return save_blob(self.blob_store(), Blob(name, tree.read(name)))

    # References

    @requires_repo
    def head_ref(self) -> SymRef:
        """Get the symbolic reference HEAD points to, e.g. ``heads/master``.

        :raises RepositoryError: If the HEAD file is missing or does not name a branch."""
        head_file = self.head_file()
        if not head_file.exists():
            msg = 'HEAD ref file does not exist'
            raise RepositoryError(msg)

        ref = read_ref(head_file)
        if not isinstance(ref, SymRef):
            msg = f'HEAD must name a branch, found {ref}'
            raise RepositoryError(msg)
        return ref

    @requires_repo
    def current_branch(self) -> str:
        """Return the name of the checked out branch."""
        return self.head_ref().removeprefix(f'{HEADS_DIR}/')

    @requires_repo
    def head_commit(self) -> HashRef:
        """Return the hash of the commit the current branch points to."""
        return self.branch_head(self.current_branch())

    @requires_repo
    def branches(self) -> list[str]:
        """Get the sorted names of all branches, including tracking branches such as ``origin/master``."""
        heads_dir = self.heads_dir()
        return sorted(ref_file.relative_to(heads_dir).as_posix() for ref_file in heads_dir.rglob('*')
                      if ref_file.is_file() and not ref_file.name.startswith('.'))

    @requires_repo
    def branch_exists(self, branch: str) -> bool:
        return bool(branch) and (self.heads_dir() / branch).is_file()

    @requires_repo
    def branch_head(self, branch: str) -> HashRef:
        """Return the hash of the commit a branch points to.

        :raises NoSuchBranch: If the branch does not exist.
        :raises RepositoryError: If the branch ref is malformed."""
        if not self.branch_exists(branch):
            msg = 'No such branch exists.'
            raise NoSuchBranch(msg)

        ref = read_ref(self.heads_dir() / branch)
        if not isinstance(ref, HashRef):
            msg = f'Branch "{branch}" does not point to a commit'
            raise RepositoryError(msg)
        return ref

    @requires_repo
    def update_branch(self, branch: str, commit_ref: HashRef) -> None:
        """Point a branch at a commit, creating the branch if needed.

        :raises NotFound: If the commit does not exist."""
        if commit_ref not in self.commit_store():
            msg = 'No commit with that id exists.'
            raise NotFound(msg)

        write_ref(self.heads_dir() / branch, commit_ref)
        logger.debug('Branch {} now points to {}', branch, commit_ref[:7])

    @requires_repo
    def add_branch(self, branch: str) -> None:
        """Add a new branch pointing to the current head commit.

        :param branch: The name of the branch to add.
        :raises ValueError: If the branch name is empty.
        :raises AlreadyExists: If the branch already exists, or the name is taken by a remote
            or its tracking branches."""
        if not branch:
            msg = 'Branch name is required'
            raise ValueError(msg)
        if self.branch_exists(branch):
            msg = 'A branch with that name already exists.'
            raise AlreadyExists(msg)
        if self._ref_path_taken(branch) or branch.split('/')[0] in self.remotes():
            msg = f'The name {branch} is taken by a remote.'
            raise AlreadyExists(msg)

        self.update_branch(branch, self.head_commit())
        logger.info('Created branch {}', branch)

    def _ref_path_taken(self, branch: str) -> bool:
        """Check whether ``branch`` cannot be stored as a ref file: its path is a
        directory of tracking branches, or one of its parent paths is a branch."""
        heads_dir = self.heads_dir()
        ref_file = heads_dir / branch
        if ref_file.is_dir():
            return True
        return any(parent.is_file() for parent in ref_file.parents if parent.is_relative_to(heads_dir))

    @requires_repo
    def delete_branch(self, branch: str) -> None:
        """Delete a branch. Its commits stay in the repository.

        :param branch: The name of the branch to delete.
        :raises ValueError: If the branch name is empty.
        :raises NoSuchBranch: If the branch does not exist.
        :raises IsCurrentBranch: If the branch is checked out."""
        if not branch:
            msg = 'Branch name is required'
            raise ValueError(msg)
        if not self.branch_exists(branch):
            msg = 'A branch with that name does not exist.'
            raise NoSuchBranch(msg)
        if branch == self.current_branch():
            msg = 'Cannot remove the current branch.'
            raise IsCurrentBranch(msg)

        (self.heads_dir() / branch).unlink()
        logger.info('Deleted branch {}', branch)

    @requires_repo
    def resolve_ref(self, ref: HashRef | SymRef | str) -> HashRef:
        """Resolve a reference to a full commit hash.

        Accepts a full hash, ``HEAD``, a branch name or an abbreviated commit hash.

        :raises NotFound: If nothing matches.
        :raises AmbiguousId: If an abbreviated hash matches several commits.
        :raises RefError: If the reference is not a string."""
        match ref:
            case HashRef() if ref in self.commit_store():
                return ref
            case SymRef():
                if ref.upper() == HEAD_FILE:
                    return self.head_commit()
                return self.branch_head(ref.removeprefix(f'{HEADS_DIR}/'))
            case str():
                if ref.upper() == HEAD_FILE:
                    return self.head_commit()
                if self.branch_exists(ref):
                    return self.branch_head(ref)
                return self.resolve_commit_id(ref)
            case _:
                msg = f'Invalid reference type: {type(ref)}'
                raise RefError(msg)

    @requires_repo
    def resolve_commit_id(self, commit_id: str) -> HashRef:
        """Expand a full or abbreviated commit hash.

        :raises NotFound: If no commit starts with ``commit_id``.
        :raises AmbiguousId: If several commits start with ``commit_id``."""
        is_hex = bool(commit_id) and all(c in HASH_CHARSET for c in commit_id.lower())
        matches = self.commit_store().find(commit_id) if is_hex else []

        if not matches:
            msg = 'No commit with that id exists.'
            raise NotFound(msg)
        if len(matches) > 1:
            msg = f'Commit id {commit_id} is ambiguous.'
            raise AmbiguousId(msg)
        return matches[0]

    # Staging area and configuration

    @requires_repo
    def staging_area(self) -> StagingArea:
        return load_staging_area(self.index_file())

    @requires_repo
    def config(self) -> RepositoryConfig:
        return load_config(self.config_file())

    @requires_repo
    def set_config(self, **changes: object) -> RepositoryConfig:
        """Change configuration values and persist them.

        :raises ValueError: If a key is unknown or a value invalid."""
        config = self.config().replace(**changes)
        save_config(self.config_file(), config)
        return config

    # Staging and committing

    @requires_repo
    def add(self, name: str) -> None:
        """Stage a working file for the next commit.

        :param name: The name of the file in the working directory.
        :raises NotFound: If the file does not exist."""
        blob_ref = self.snapshot(name)
        head = self.load_commit(self.head_commit())

        area = self.staging_area()
        area.stage_snapshot(head, name, blob_ref)
        save_staging_area(self.index_file(), area)

    @requires_repo
    def commit(self, message: str) -> HashRef:
        """Create a commit from the staging area and advance the current branch to it.

        :param message: The commit message.
        :return: The hash of the new commit.
        :raises EmptyMessage: If the message is blank.
        :raises NothingToCommit: If nothing is staged."""
        if not message or not message.strip():
            msg = 'Please enter a commit message.'
            raise EmptyMessage(msg)

        area = self.staging_area()
        if area.is_empty():
            msg = 'No changes added to the commit.'
            raise NothingToCommit(msg)

        return self._commit_staged(area, message)

    def _commit_staged(self, area: StagingArea, message: str, merge_parent: HashRef | None = None) -> HashRef:
        branch = self.current_branch()
        parent_ref = self.branch_head(branch)
        parent = self.load_commit(parent_ref)

        commit = Commit(message, current_timestamp(), parent_ref, merge_parent, area.apply_to(parent.file_table))
        commit_ref = save_commit(self.commit_store(), commit)

        save_staging_area(self.index_file(), StagingArea())
        self.update_branch(branch, commit_ref)

        logger.info('Committed {} on {}: {}', commit_ref[:7], branch, message)
        return commit_ref

    @requires_repo
    def remove(self, name: str) -> None:
        """Unstage a file, and stop tracking it if the head commit tracks it.

        A tracked file is also deleted from the working directory.

        :raises NothingToRemove: If the file is neither staged for addition nor tracked."""
        head = self.load_commit(self.head_commit())
        area = self.staging_area()

        if name not in area.additions and not head.tracks(name):
            msg = 'No reason to remove the file.'
            raise NothingToRemove(msg)

        area.additions.pop(name, None)
        if head.tracks(name):
            area.stage_removal(name)
            self.working_tree().delete(name)

        save_staging_area(self.index_file(), area)

    # History

    @requires_repo
    def log(self, tip: HashRef | SymRef | str | None = None) -> Generator[LogEntry, None, None]:
        """Generate the first-parent history of a commit, newest first.

        :param tip: The reference to start from. Defaults to the current head.
        :raises RepositoryError: If a commit cannot be loaded."""
        current_hash: HashRef | None = self.resolve_ref(tip) if tip is not None else self.head_commit()

        try:
            while current_hash:
                commit = self.load_commit(current_hash)
                yield LogEntry(current_hash, commit)

                current_hash = commit.parent
        except RepositoryError as e:
            msg = f'Error loading commit {current_hash}'
            raise RepositoryError(msg) from e

    @requires_repo
    def global_log(self) -> Generator[LogEntry, None, None]:
        """Generate every commit in the repository, in no particular order."""
        for commit_ref in self.commit_store().ids():
            yield LogEntry(commit_ref, self.load_commit(commit_ref))

    @requires_repo
    def find(self, message: str) -> list[HashRef]:
        """Return the hashes of all commits with exactly this message.

        :raises NotFound: If there are none."""
        found = [entry.commit_ref for entry in self.global_log() if entry.commit.message == message]
        if not found:
            msg = 'Found no commit with that message.'
            raise NotFound(msg)
        return found

    @requires_repo
    def ancestors(self, ref: HashRef | SymRef | str | None = None) -> set[HashRef]:
        """Return every commit reachable from ``ref`` (default: the current head), including itself."""
        start = self.resolve_ref(ref) if ref is not None else self.head_commit()
        return graph.ancestors(self.load_commit, start)

    @requires_repo
    def common_ancestor(self, ref1: HashRef | SymRef | str, ref2: HashRef | SymRef | str) -> HashRef | None:
        """Find the split point used to merge ``ref2`` into ``ref1``, if the histories meet."""
        return graph.split_point(self.load_commit, self.resolve_ref(ref1), self.resolve_ref(ref2))

    @requires_repo
    def status(self) -> Status:
        """Describe branches, staged changes and the state of the working tree."""
        head = self.load_commit(self.head_commit())
        area = self.staging_area()
        tree = self.working_tree()
        files = tree.list_top_level()

        def changed(name: str, blob_ref: HashRef) -> bool:
            return hash_object(Blob(name, tree.read(name))) != blob_ref

        modified: list[str] = []
        for name, blob_ref in area.additions.items():
            if not tree.exists(name):
                modified.append(f'{name} (deleted)')
            elif changed(name, blob_ref):
                modified.append(f'{name} (modified)')
        for name, blob_ref in head.file_table.items():
            if area.is_staged(name):
                continue
            if not tree.exists(name):
                modified.append(f'{name} (deleted)')
            elif changed(name, blob_ref):
                modified.append(f'{name} (modified)')

        untracked = [name for name in files
                     if (not head.tracks(name) and name not in area.additions) or name in area.removals]

        return Status(
            current_branch=self.current_branch(),
            branches=self.branches(),
            staged=sorted(area.additions),
            removed=sorted(area.removals),
            modified=sorted(modified),
            untracked=untracked,
        )

    # Working tree

    def _check_untracked(self, head: Commit, target: Commit) -> None:
        """Refuse to overwrite untracked working files whose content differs from ``target``'s.

        :raises UntrackedObstruction: If such a file exists."""
        tree = self.working_tree()
        for name, blob_ref in target.file_table.items():
            if head.tracks(name) or not tree.exists(name):
                continue
            if hash_object(Blob(name, tree.read(name))) != blob_ref:
                raise UntrackedObstruction(UNTRACKED_IN_THE_WAY)

    def _materialize(self, head: Commit, target: Commit) -> None:
        """Make the working tree hold exactly ``target``'s files, replacing ``head``'s."""
        tree = self.working_tree()
        for name in head.file_table:
            if not target.tracks(name):
                tree.delete(name)
        for name, blob_ref in target.file_table.items():
            tree.write(name, self.load_blob(blob_ref).contents)

    @requires_repo
    def checkout_file(self, name: str, commit: HashRef | SymRef | str | None = None) -> None:
        """Restore one working file from the head commit or from a given commit.

        The staging area is left as is.

        :param name: The file to restore.
        :param commit: A full or abbreviated commit hash or branch name. Defaults to the head commit.
        :raises NotFound: If the commit does not exist or does not track the file."""
        commit_ref = self.head_commit() if commit is None else self.resolve_ref(commit)
        blob_ref = self.load_commit(commit_ref).blob_for(name)
        if blob_ref is None:
            msg = 'File does not exist in that commit.'
            raise NotFound(msg)

        self.working_tree().write(name, self.load_blob(blob_ref).contents)

    @requires_repo
    def checkout_branch(self, branch: str) -> None:
        """Switch to another branch, making the working tree match its head commit.

        :raises NoSuchBranch: If the branch does not exist.
        :raises IsCurrentBranch: If the branch is already checked out.
        :raises UntrackedObstruction: If an untracked file would be overwritten."""
        if not self.branch_exists(branch):
            msg = 'No such branch exists.'
            raise NoSuchBranch(msg)
        if branch == self.current_branch():
            msg = 'No need to checkout the current branch.'
            raise IsCurrentBranch(msg)

        head = self.load_commit(self.head_commit())
        target = self.load_commit(self.branch_head(branch))
        self._check_untracked(head, target)

        self._materialize(head, target)
        save_staging_area(self.index_file(), StagingArea())
        write_ref(self.head_file(), branch_ref(branch))
        logger.info('Switched to branch {}', branch)

    @requires_repo
    def reset(self, commit: HashRef | SymRef | str) -> HashRef:
        """Move the current branch to a commit and make the working tree match it.

        :param commit: A full or abbreviated commit hash or branch name.
        :return: The full hash of the commit.
        :raises NotFound: If the commit does not exist.
        :raises UntrackedObstruction: If an untracked file would be overwritten."""
        commit_ref = self.resolve_ref(commit)
        head = self.load_commit(self.head_commit())
        target = self.load_commit(commit_ref)
        self._check_untracked(head, target)

        self._materialize(head, target)
        save_staging_area(self.index_file(), StagingArea())
        self.update_branch(self.current_branch(), commit_ref)
        logger.info('Reset {} to {}', self.current_branch(), commit_ref[:7])
        return commit_ref

    # Merging

    @requires_repo
    def merge(self, branch: str) -> MergeResult:
        """Merge another branch into the current one.

        :param branch: The branch to merge from, possibly a tracking branch such as ``origin/master``.
        :return: The outcome. A conflicted merge still produces a merge commit.
        :raises UncommittedChanges: If the staging area is not empty.
        :raises NoSuchBranch: If the branch does not exist.
        :raises IsCurrentBranch: If the branch is the current one.
        :raises UntrackedObstruction: If an untracked file would be overwritten."""
        if not self.staging_area().is_empty():
            msg = 'You have uncommitted changes.'
            raise UncommittedChanges(msg)
        if not self.branch_exists(branch):
            msg = 'A branch with that name does not exist.'
            raise NoSuchBranch(msg)
        current_branch = self.current_branch()
        if branch == current_branch:
            msg = 'Cannot merge a branch with itself.'
            raise IsCurrentBranch(msg)

        current_ref = self.head_commit()
        other_ref = self.branch_head(branch)
        current = self.load_commit(current_ref)
        other = self.load_commit(other_ref)
        self._check_untracked(current, other)

        split_ref = graph.split_point(self.load_commit, current_ref, other_ref)
        if split_ref is None:
            msg = f'Branches {current_branch} and {branch} share no history.'
            raise NotFound(msg)

        if split_ref == other_ref:
            logger.info('{} is already merged into {}', branch, current_branch)
            return MergeResult(MergeOutcome.NO_OP, current_ref, 'Given branch is an ancestor of the current branch.')

        if split_ref == current_ref:
            self._materialize(current, other)
            self.update_branch(current_branch, other_ref)
            logger.info('Fast-forwarded {} to {}', current_branch, other_ref[:7])
            return MergeResult(MergeOutcome.FAST_FORWARDED, other_ref, 'Current branch fast-forwarded.')

        return self._three_way_merge(current_branch, branch, current_ref, other_ref,
                                     self.load_commit(split_ref), current, other)

    def _three_way_merge(self, current_branch: str, other_branch: str, current_ref: HashRef, other_ref: HashRef,
                         split: Commit, current: Commit, other: Commit) -> MergeResult:
        style = self.config().conflict_style
        blobs = self.blob_store()
        area = StagingArea()
        writes: dict[str, bytes] = {}
        deletes: list[str] = []
        conflicts: list[str] = []

        def contents(blob_ref: HashRef | None) -> bytes:
            return self.load_blob(blob_ref).contents if blob_ref is not None else b''

        for decision in plan_merge(split, current, other):
            name = decision.name
            match decision.action:
                case FileAction.TAKE_OTHER:
                    writes[name] = contents(decision.other)
                    area.stage_addition(name, decision.other)
                case FileAction.REMOVE:
                    deletes.append(name)
                    area.stage_removal(name)
                case FileAction.CONFLICT:
                    merged, conflicted = render_conflict(style, contents(decision.base), contents(decision.current),
                                                         contents(decision.other))
                    writes[name] = merged
                    area.stage_addition(name, save_blob(blobs, Blob(name, merged)))
                    if conflicted:
                        conflicts.append(name)
                case FileAction.KEEP:
                    pass

        tree = self.working_tree()
        for name in deletes:
            tree.delete(name)
        for name, data in writes.items():
            tree.write(name, data)

        commit_ref = self._commit_staged(area, merge_message(other_branch, current_branch), merge_parent=other_ref)

        if conflicts:
            logger.warning('Merge of {} into {} has conflicts in {}', other_branch, current_branch,
                           ', '.join(conflicts))
            return MergeResult(MergeOutcome.COMPLETED, commit_ref, 'Encountered a merge conflict.', conflicts)
        return MergeResult(MergeOutcome.COMPLETED, commit_ref, merge_message(other_branch, current_branch))

    # Remotes

    @requires_repo
    def remotes(self) -> dict[str, str]:
        """Return the remote name to repository directory table."""
        return load_remotes(self.remotes_file())

    @requires_repo
    def add_remote(self, name: str, path: Path | str) -> None:
        """Register another repository under a name.

        :param name: The remote's name.
        :param path: The remote's repository directory, e.g. ``../other/.gitlet``.
            Relative paths are taken relative to the working directory.
        :raises ValueError: If the name is empty or contains a slash.
        :raises AlreadyExists: If a remote or a local branch with that name exists."""
        if not name or '/' in name:
            msg = 'Remote name is required and may not contain "/"'
            raise ValueError(msg)

        remotes = self.remotes()
        if name in remotes:
            msg = 'A remote with that name already exists.'
            raise AlreadyExists(msg)
        if self.branch_exists(name):
            msg = f'The name {name} is taken by a local branch.'
            raise AlreadyExists(msg)

        remotes[name] = Path(path).as_posix()
        save_remotes(self.remotes_file(), remotes)
        logger.info('Added remote {} at {}', name, path)

    @requires_repo
    def remove_remote(self, name: str) -> None:
        """Forget a remote. Its tracking branches are kept.

        :raises NotFound: If there is no remote with that name."""
        remotes = self.remotes()
        if name not in remotes:
            msg = 'A remote with that name does not exist.'
            raise NotFound(msg)

        del remotes[name]
        save_remotes(self.remotes_file(), remotes)
        logger.info('Removed remote {}', name)

    @requires_repo
    def remote_repository(self, name: str) -> 'Repository':
        """Open the repository registered under a remote name.

        :raises NotFound: If the remote is unknown or its directory does not exist."""
        path = self.remotes().get(name)
        if path is None:
            msg = 'Remote directory not found.'
            raise NotFound(msg)

        remote_dir = Path(path)
        if not remote_dir.is_absolute():
            remote_dir = self.working_dir / remote_dir

        remote = Repository(remote_dir.parent, remote_dir.name)
        if not remote.exists():
            msg = 'Remote directory not found.'
            raise NotFound(msg)
        return remote

    @requires_repo
    def push(self, remote_name: str, branch: str) -> HashRef:
        """Append the current branch's history to a branch of a remote repository.

        The remote branch is created if it does not exist.

        :return: The new head of the remote branch.
        :raises NotFound: If the remote is unknown or missing.
        :raises NotFastForwardable: If the remote branch head is not in the local history.
            Nothing is written to the remote in that case."""
        remote = self.remote_repository(remote_name)
        local_ref = self.head_commit()

        if remote.branch_exists(branch):
            remote_ref = remote.branch_head(branch)
            if not graph.is_ancestor(self.load_commit, remote_ref, local_ref):
                msg = 'Please pull down remote changes before pushing.'
                raise NotFastForwardable(msg)

        stats = copy_history(self.stores(), remote.stores(), local_ref)
        remote.update_branch(branch, local_ref)
        logger.info('Pushed {} to {}/{} ({} commits, {} blobs)', local_ref[:7], remote_name, branch,
                    stats.commits, stats.blobs)
        return local_ref

    @requires_repo
    def fetch(self, remote_name: str, branch: str) -> str:
        """Copy a remote branch's history into a local tracking branch.

        :return: The name of the tracking branch, e.g. ``origin/master``.
        :raises NotFound: If the remote is unknown or missing.
        :raises NoSuchRemoteBranch: If the remote has no such branch."""
        remote = self.remote_repository(remote_name)
        if not remote.branch_exists(branch):
            msg = 'That remote does not have that branch.'
            raise NoSuchRemoteBranch(msg)

        remote_ref = remote.branch_head(branch)
        stats = copy_history(remote.stores(), self.stores(), remote_ref)

        local_branch = tracking_branch(remote_name, branch)
        self.update_branch(local_branch, remote_ref)
        logger.info('Fetched {} into {} ({} commits, {} blobs)', remote_ref[:7], local_branch,
                    stats.commits, stats.blobs)
        return local_branch

    @requires_repo
    def pull(self, remote_name: str, branch: str) -> MergeResult:
        """Fetch a remote branch and merge it into the current branch."""
        return self.merge(self.fetch(remote_name, branch))


def branch_ref(branch: str) -> SymRef:
    """Create a symbolic reference for a branch name.

    :param branch: The name of the branch.
    :return: A SymRef object representing the branch reference."""
    return SymRef(f'{HEADS_DIR}/{branch}')
