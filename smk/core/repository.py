"""Repository management and object store for Smk."""

import re
from pathlib import Path
from typing import Iterator, Optional, Tuple
from loguru import logger
from .config import DEFAULT_BRANCH, get_config
from .errors import RepositoryError
from .hash import hash_content, object_header
from .objects import SmkObject, parse_object

SMK_DIR = '.smk'

_HASH_RE = re.compile(r'^[0-9a-f]{40}$')


class Repository:
    """
    Represents a Smk repository.

    A repository is the explicit context every operation runs against: it
    owns the paths of the .smk directory and provides methods for reading
    and writing objects in the content-addressed store.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.smk_dir = self.work_tree / SMK_DIR
        self.objects_dir = self.smk_dir / 'objects'
        self.refs_dir = self.smk_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.head_file = self.smk_dir / 'HEAD'
        self.index_file = self.smk_dir / 'index'
        self.config_file = self.smk_dir / 'config'
        self.merge_head_file = self.smk_dir / 'MERGE_HEAD'

        # Managers are created lazily to avoid circular imports
        self._ref_manager = None
        self._diff_engine = None
        self._merge_engine = None
        self._work_tree_files = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def diff(self):
        """Get DiffEngine instance."""
        if self._diff_engine is None:
            from smk.operations.diff import DiffEngine
            self._diff_engine = DiffEngine(self)
        return self._diff_engine

    @property
    def merge(self):
        """Get MergeEngine instance."""
        if self._merge_engine is None:
            from smk.operations.merge import MergeEngine
            self._merge_engine = MergeEngine(self)
        return self._merge_engine

    @property
    def files(self):
        """Get WorkTree instance for the working directory."""
        if self._work_tree_files is None:
            from smk.operations.worktree import WorkTree
            self._work_tree_files = WorkTree(self)
        return self._work_tree_files

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .smk directory structure:
        .smk/
        ├── objects/         # Object database
        ├── refs/
        │   └── heads/
        │       └── master   # Default branch (empty until the first commit)
        ├── HEAD             # Current branch/commit
        ├── index            # Staging area
        └── config           # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryError: If repository already exists
        """
        if self.smk_dir.exists():
            raise RepositoryError(f"Repository already exists at {self.smk_dir}")

        self.smk_dir.mkdir(parents=True)
        self.objects_dir.mkdir()
        self.heads_dir.mkdir(parents=True)

        self.head_file.write_text(f'ref: refs/heads/{DEFAULT_BRANCH}\n')
        (self.heads_dir / DEFAULT_BRANCH).write_text('')
        self.index_file.write_text('')

        config_content = (
            '[core]\n'
            '\trepositoryformatversion = 0\n'
            f'\tdefaultbranch = {DEFAULT_BRANCH}\n'
        )
        self.config_file.write_text(config_content)

        logger.info(f"Initialized empty repository in {self.smk_dir}")
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / SMK_DIR).is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    @classmethod
    def open(cls, path: str = '.') -> 'Repository':
        """
        Find the repository containing path.

        Raises:
            RepositoryError: If no repository is found
        """
        repo = cls.find_repository(path)
        if repo is None:
            raise RepositoryError("Not a smk repository")
        return repo

    @property
    def default_branch(self) -> str:
        """Name of the branch that can never be deleted (core.defaultbranch)."""
        return get_config(self).default_branch()

    def object_path(self, hash: str) -> Path:
        """
        Get filesystem path for an object.

        Args:
            hash: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / hash

    def store(self, obj_type: str, content: bytes) -> str:
        """
        Store raw content under its content address.

        Storing is idempotent: if an object with the same serialized form
        already exists, its hash is returned and nothing is rewritten.

        Args:
            obj_type: Object type (blob, tree, commit)
            content: Raw object content

        Returns:
            str: SHA-1 hash of the object
        """
        hash = hash_content(obj_type, content)
        path = self.object_path(hash)

        if path.exists():
            return hash

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(object_header(obj_type, len(content)) + content)
        logger.debug(f"Stored {obj_type} {hash[:7]} ({len(content)} bytes)")

        return hash

    def write_object(self, obj: SmkObject) -> str:
        """
        Write object to repository.

        Args:
            obj: Smk object to write

        Returns:
            str: SHA-1 hash of the object
        """
        return self.store(obj.type, obj.serialize())

    def read_raw(self, hash: str) -> Tuple[str, bytes]:
        """
        Read the kind and raw content of an object.

        A missing or malformed object yields the sentinel ('', b'') so
        callers can treat an empty kind as "absent".

        Args:
            hash: 40-character SHA-1 hash

        Returns:
            Tuple of (object type, content)
        """
        if not hash or not _HASH_RE.match(hash):
            return '', b''

        path = self.object_path(hash)
        if not path.is_file():
            return '', b''

        data = path.read_bytes()
        type_end = data.find(b'\n')
        size_end = data.find(b'\n', type_end + 1) if type_end != -1 else -1
        if size_end == -1:
            logger.warning(f"Object {hash[:7]} has no valid header")
            return '', b''

        obj_type = data[:type_end].decode(errors='replace')
        content = data[size_end + 1:]

        try:
            size = int(data[type_end + 1:size_end])
        except ValueError:
            logger.warning(f"Object {hash[:7]} has an invalid size header")
            return '', b''

        if size != len(content):
            logger.warning(
                f"Object {hash[:7]} size mismatch: expected {size}, got {len(content)}"
            )
            return '', b''

        return obj_type, content

    def read_object(self, hash: str) -> Optional[SmkObject]:
        """
        Read and parse an object.

        Args:
            hash: 40-character SHA-1 hash

        Returns:
            The Blob, Tree or Commit, or None if it does not exist
        """
        obj_type, content = self.read_raw(hash)
        if not obj_type:
            return None

        try:
            return parse_object(obj_type, content)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Object {hash[:7]} could not be parsed: {e}")
            return None

    def object_exists(self, hash: str) -> bool:
        """
        Check if object exists in repository.

        Args:
            hash: 40-character SHA-1 hash

        Returns:
            bool: True if object exists
        """
        return bool(hash) and _HASH_RE.match(hash) is not None and self.object_path(hash).is_file()

    def iter_object_hashes(self) -> Iterator[str]:
        """Yield the hash of every stored object."""
        if not self.objects_dir.exists():
            return
        for path in sorted(self.objects_dir.iterdir()):
            if path.is_file() and _HASH_RE.match(path.name):
                yield path.name

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
