"""Access to the files of the working directory."""

from pathlib import Path


class WorkingTree:
    """The top-level files of a working directory.

    Subdirectories, including the repository metadata directory, are not part of the tree."""

    def __init__(self, root: Path | str, ignored: frozenset[str] = frozenset()) -> None:
        self.root = Path(root)
        self.ignored = ignored

    def path(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def read(self, name: str) -> bytes:
        return self.path(name).read_bytes()

    def write(self, name: str, contents: bytes) -> None:
        self.path(name).write_bytes(contents)

    def delete(self, name: str) -> None:
        self.path(name).unlink(missing_ok=True)

    def list_top_level(self) -> list[str]:
        """Sorted names of the plain files at the top of the working directory."""
        return sorted(item.name for item in self.root.iterdir()
                      if item.is_file() and item.name not in self.ignored)
