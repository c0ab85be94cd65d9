"""Errors raised by libgitlet.

Each error carries the literal diagnostic a front end prints before stopping."""


class RepositoryError(Exception):
    """Exception raised for repository-related errors."""


class NotFound(RepositoryError):
    """A commit, blob, file, branch or remote does not exist."""


class RepositoryNotFoundError(NotFound):
    """Exception raised when a repository is not found."""


class NoSuchBranch(NotFound):
    """The named branch does not exist."""


class NoSuchRemoteBranch(NotFound):
    """The remote repository has no branch with the requested name."""


class AmbiguousId(RepositoryError):
    """An abbreviated commit id matches more than one commit."""


class AlreadyExists(RepositoryError):
    """A branch, remote or repository with that name already exists."""


class IsCurrentBranch(RepositoryError):
    """The operation is not allowed on the currently checked out branch."""


class EmptyMessage(RepositoryError):
    """A commit was requested without a message."""


class NothingToCommit(RepositoryError):
    """The staging area is empty."""


class NothingToRemove(RepositoryError):
    """The file is neither staged nor tracked."""


class UncommittedChanges(RepositoryError):
    """The staging area must be empty for this operation."""


class UntrackedObstruction(RepositoryError):
    """An untracked working file would be overwritten."""


class NotFastForwardable(RepositoryError):
    """The remote branch head is not in the history of the local head."""


class CorruptObject(RepositoryError):
    """A stored object could not be decoded."""
