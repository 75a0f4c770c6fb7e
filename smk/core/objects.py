"""Smk objects: the tagged union stored in the object database."""

import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from .hash import hash_content


class SmkObject(ABC):
    """Base class for all Smk objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data (without header)
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data (without header)
        """
        pass

    @property
    def type(self) -> str:
        """
        Return object type name.

        Returns:
            str: Object type (blob, tree, commit)
        """
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type>\\n<size>\\n<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_content(self.type, self.serialize())
        return self._hash

    @property
    def hash(self) -> str:
        """
        Get object hash.

        Returns:
            str: 40-character SHA-1 hash
        """
        return self.compute_hash()


class Blob(SmkObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    def __init__(self, data: Optional[bytes] = None):
        """
        Initialize a blob.

        Args:
            data: File content as bytes
        """
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath: str) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        """String representation of blob."""
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class Tree(SmkObject):
    """
    Represents a directory snapshot.

    A tree is a flat mapping of slash-separated paths (relative to the
    work tree) to blob hashes. Entries are serialized in path order so that
    two trees with the same entries always hash identically, whatever order
    the entries were added in.
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        """
        Initialize tree.

        Args:
            entries: Optional mapping of path to blob hash
        """
        super().__init__()
        self.entries: Dict[str, str] = dict(entries or {})

    def add_entry(self, path: str, blob_hash: str) -> None:
        """
        Add or replace an entry.

        Args:
            path: File path relative to the work tree
            blob_hash: Hash of the blob holding the file content
        """
        self.entries[path] = blob_hash
        self._hash = None

    def serialize(self) -> bytes:
        """
        Serialize tree.

        Format: one "<path>\\t<blob hash>\\n" record per entry, sorted by path.

        Returns:
            bytes: Serialized tree data
        """
        return ''.join(
            f"{path}\t{self.entries[path]}\n" for path in sorted(self.entries)
        ).encode()

    def deserialize(self, data: bytes) -> None:
        self.entries = {}
        for line in data.decode().split('\n'):
            path, sep, blob_hash = line.partition('\t')
            if not sep or not path or not blob_hash:
                continue
            self.entries[path] = blob_hash
        self._hash = None

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Tree(entries={len(self.entries)})"


class Commit(SmkObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history (none for a root commit, two for a merge)
    - Author
    - Timestamp (unix seconds)
    - Commit message
    """

    def __init__(self):
        """Initialize empty commit."""
        super().__init__()
        self.tree: str = ''
        self.parents: List[str] = []
        self.author: str = ''
        self.timestamp: int = 0
        self.message: str = ''

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero to two)
        author <author>
        date <unix seconds>

        <commit message>

        Returns:
            bytes: Serialized commit data
        """
        lines = [f'tree {self.tree}']

        for parent in self.parents:
            lines.append(f'parent {parent}')

        lines.append(f'author {self.author}')
        lines.append(f'date {self.timestamp}')
        lines.append('')
        lines.append(self.message)

        return ('\n'.join(lines) + '\n').encode()

    def deserialize(self, data: bytes) -> None:
        content = data.decode()
        header, _, message = content.partition('\n\n')

        self.parents = []
        for line in header.split('\n'):
            if line.startswith('tree '):
                self.tree = line[5:]
            elif line.startswith('parent '):
                self.parents.append(line[7:])
            elif line.startswith('author '):
                self.author = line[7:]
            elif line.startswith('date '):
                self.timestamp = int(line[5:])

        if message.endswith('\n'):
            message = message[:-1]
        self.message = message
        self._hash = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split('\n')[0]

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        message: str,
        timestamp: Optional[int] = None
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes (at most two)
            author: Author name and email (e.g., "Name <email>")
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)

        Returns:
            Commit: New commit object
        """
        if len(parent_hashes) > 2:
            raise ValueError("A commit has at most two parents")

        commit = cls()
        commit.tree = tree_hash
        commit.parents = list(parent_hashes)
        commit.author = author
        commit.message = message
        commit.timestamp = int(time.time()) if timestamp is None else timestamp

        return commit

    def __repr__(self) -> str:
        """String representation."""
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{self.summary[:50]}')"


OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
}


def parse_object(obj_type: str, content: bytes) -> Optional[SmkObject]:
    """
    Build a typed object from its kind and raw content.

    Args:
        obj_type: Object type read from the header
        content: Raw content following the header

    Returns:
        The parsed object, or None for an empty or unknown kind
    """
    cls = OBJECT_TYPES.get(obj_type)
    if cls is None:
        return None

    obj = cls()
    obj.deserialize(content)
    return obj
