"""Index (staging area) implementation."""

from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple
from smk.core.objects import Blob


class Index:
    """
    Smk index (staging area) implementation.

    The index maps paths to the blob hashes that the next commit will
    contain. It is emptied after every successful commit, so an empty index
    means nothing is staged.

    On disk it is a text file of "<path>\\t<blob hash>" lines.
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        """Initialize index."""
        self.entries: Dict[str, str] = dict(entries or {})

    @classmethod
    def load(cls, repo) -> 'Index':
        """
        Read the index of a repository.

        Args:
            repo: Repository instance

        Returns:
            Index: Current staging area (empty if no index file exists)
        """
        index = cls()
        index.read(str(repo.index_file))
        return index

    def save(self, repo) -> None:
        """Write the index back to the repository."""
        self.write(str(repo.index_file))

    def stage(self, path: str, blob_hash: str) -> None:
        """
        Add or update entry in index.

        Args:
            path: File path relative to repository root
            blob_hash: Hash of the staged blob
        """
        self.entries[path] = blob_hash

    def add_file(self, repo, filepath: str) -> str:
        """
        Stage a file for commit.

        The file content is stored as a blob and its hash recorded under
        the path relative to the work tree.

        Args:
            repo: Repository instance
            filepath: Path to file (absolute or relative to the work tree)

        Returns:
            str: Hash of staged content

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the path is not a file, lies outside the work
                tree or is hidden (the work tree never lists hidden files)
        """
        file_path = Path(filepath)

        if not file_path.is_absolute():
            file_path = repo.work_tree / file_path

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        if not file_path.is_file():
            raise ValueError(f"Not a file: {filepath}")

        try:
            rel_path = file_path.resolve().relative_to(repo.work_tree).as_posix()
        except ValueError:
            raise ValueError(f"Outside repository: {filepath}")

        if repo.files.full_path(rel_path) is None:
            raise ValueError(f"Hidden paths cannot be tracked: {rel_path}")

        blob_hash = repo.write_object(Blob.from_file(str(file_path)))
        self.stage(rel_path, blob_hash)

        return blob_hash

    def get(self, path: str) -> Optional[str]:
        """Get the staged hash for path."""
        return self.entries.get(path)

    def clear(self) -> None:
        """Clear all entries from index."""
        self.entries.clear()

    def matches(self, tree_entries: Dict[str, str]) -> bool:
        """
        Check whether the index holds exactly the given tree.

        Args:
            tree_entries: Mapping of path to blob hash

        Returns:
            True if both mappings are equal
        """
        return self.entries == tree_entries

    def write(self, index_path: str) -> None:
        """
        Write index to disk.

        Entries are written sorted by path.

        Args:
            index_path: Path to index file
        """
        content = ''.join(
            f"{path}\t{self.entries[path]}\n" for path in sorted(self.entries)
        )
        Path(index_path).write_text(content)

    def read(self, index_path: str) -> None:
        """
        Read index from disk.

        A missing or empty file gives an empty index. Lines without a tab
        separator are skipped.

        Args:
            index_path: Path to index file
        """
        self.entries.clear()

        path = Path(index_path)
        if not path.exists():
            return

        for line in path.read_text().split('\n'):
            file_path, sep, blob_hash = line.partition('\t')
            if not sep or not file_path or not blob_hash:
                continue
            self.entries[file_path] = blob_hash

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(sorted(self.entries.items()))

    def __contains__(self, path: str) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        """Number of entries in index."""
        return len(self.entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Index(entries={len(self.entries)})"
