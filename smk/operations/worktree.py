"""Working directory file access.

The work tree is the only state Smk touches outside its own .smk
directory. Batch writes and deletes are lenient: a file that cannot be
written or removed is logged and skipped so the rest of the batch can
proceed.
"""

from pathlib import Path
from typing import Dict, List, Optional
from loguru import logger
from smk.core.hash import hash_content


class WorkTree:
    """Reads and writes tracked files in the working directory."""

    def __init__(self, repo):
        """
        Initialize work tree access.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.root = repo.work_tree

    def full_path(self, path: str) -> Optional[Path]:
        """
        Map a tracked path to a filesystem path.

        Returns:
            The absolute path, or None if path escapes the work tree or
            points into a hidden directory such as .smk
        """
        rel = Path(path)
        if rel.is_absolute() or any(part in ('', '.', '..') for part in rel.parts):
            return None
        if any(part.startswith('.') for part in rel.parts):
            return None
        return self.root / rel

    def list_files(self) -> List[str]:
        """
        List every file in the work tree.

        Hidden files and directories (including .smk) are skipped.

        Returns:
            Sorted list of slash-separated paths relative to the work tree
        """
        files = []
        for path in self.root.rglob('*'):
            rel_path = path.relative_to(self.root)
            if any(part.startswith('.') for part in rel_path.parts):
                continue
            if path.is_file():
                files.append(rel_path.as_posix())
        return sorted(files)

    def exists(self, path: str) -> bool:
        full = self.full_path(path)
        return full is not None and full.is_file()

    def read(self, path: str) -> Optional[bytes]:
        """
        Read a working file.

        Returns:
            File content, or None if the file is missing or unreadable
        """
        full = self.full_path(path)
        if full is None or not full.is_file():
            return None
        try:
            return full.read_bytes()
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            return None

    def hash_file(self, path: str) -> Optional[str]:
        """Blob hash of a working file, without storing it."""
        data = self.read(path)
        if data is None:
            return None
        return hash_content('blob', data)

    def snapshot(self) -> Dict[str, str]:
        """
        Hash every working file.

        Returns:
            Dict mapping path to blob hash
        """
        files = {}
        for path in self.list_files():
            blob_hash = self.hash_file(path)
            if blob_hash is not None:
                files[path] = blob_hash
        return files

    def write(self, path: str, data: bytes) -> bool:
        """
        Write a working file, creating parent directories as needed.

        Returns:
            True on success, False if the write failed and was skipped
        """
        full = self.full_path(path)
        if full is None:
            logger.warning(f"Skipping unsafe path {path!r}")
            return False
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(data)
        except OSError as e:
            logger.warning(f"Error writing file {path}: {e}")
            return False
        return True

    def delete(self, path: str) -> bool:
        """
        Delete a working file if it exists.

        Returns:
            True if the file is gone afterwards, False if removal failed
        """
        full = self.full_path(path)
        if full is None:
            logger.warning(f"Skipping unsafe path {path!r}")
            return False
        try:
            full.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Error removing file {path}: {e}")
            return False
        return True
