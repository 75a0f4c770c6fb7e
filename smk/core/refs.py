"""Reference management for Smk."""

import re
from typing import List, Optional, Tuple
from loguru import logger
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.objects import Commit

_INVALID_BRANCH_RE = re.compile(r'(\.\.|\s|^[-/]|/$|^HEAD$|[~^:?*\[\\])')


class RefManager:
    """
    Manages references (branches and HEAD).

    Handles:
    - Symbolic references (HEAD pointing to branch)
    - Direct references (detached HEAD)
    - Branch references (refs/heads/*), where an empty file marks a
      branch that has no commits yet
    - Reference resolution and validation
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.smk_dir = repo.smk_dir
        self.heads_dir = repo.heads_dir
        self.head_file = repo.head_file

    def _read_ref_file(self, path) -> Optional[str]:
        if not path.is_file():
            return None
        content = path.read_text().strip()
        return content or None

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return its commit hash.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/master', 'HEAD', 'master')

        Returns:
            Commit hash or None if the reference doesn't exist or has no commits
        """
        if ref_name == 'HEAD':
            return self.resolve_head()

        if ref_name.startswith('refs/'):
            content = self._read_ref_file(self.smk_dir / ref_name)
            if content and content.startswith('ref: '):
                return self.read_ref(content[5:])
            return content

        return self._read_ref_file(self.heads_dir / ref_name)

    def branch_exists(self, branch_name: str) -> bool:
        """Check if a branch ref file exists (with or without commits)."""
        return bool(branch_name) and (self.heads_dir / branch_name).is_file()

    def write_ref(self, ref_name: str, commit_hash: str) -> None:
        """
        Point a reference at a commit.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/master')
            commit_hash: Commit hash to point to

        Raises:
            NotFoundError: If commit_hash is not a stored commit
        """
        if not isinstance(self.repo.read_object(commit_hash), Commit):
            raise NotFoundError(f"Not a valid commit: {commit_hash}")

        ref_path = self.smk_dir / ref_name
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_text(commit_hash + '\n')

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash or None if there is no commit yet
        """
        content = self._read_ref_file(self.head_file)
        if content is None:
            return None

        if content.startswith('ref: '):
            return self.read_ref(content[5:].strip())

        return content

    def get_current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if in detached HEAD state
        """
        content = self._read_ref_file(self.head_file)

        if content and content.startswith('ref: refs/heads/'):
            return content[16:]

        return None

    def is_detached_head(self) -> bool:
        """
        Check if HEAD is in detached state.

        Returns:
            True if detached, False if on a branch
        """
        content = self._read_ref_file(self.head_file)
        return content is not None and not content.startswith('ref: ')

    def set_head(self, target: str, symbolic: bool = True) -> None:
        """
        Set HEAD to point to a branch or commit.

        Args:
            target: Branch name (if symbolic) or commit hash (if direct)
            symbolic: If True, create symbolic reference; if False, direct reference

        Raises:
            NotFoundError: If the branch or commit does not exist
        """
        if symbolic:
            branch_name = target[11:] if target.startswith('refs/heads/') else target
            if not self.branch_exists(branch_name):
                raise NotFoundError(f"Branch '{branch_name}' not found")
            self.head_file.write_text(f'ref: refs/heads/{branch_name}\n')
        else:
            if not isinstance(self.repo.read_object(target), Commit):
                raise NotFoundError(f"Not a valid commit: {target}")
            self.head_file.write_text(target + '\n')

    def update_head(self, commit_hash: str) -> None:
        """
        Advance whatever HEAD points at to a new commit.

        On a branch the branch ref moves; with a detached HEAD the HEAD
        file itself is rewritten.

        Args:
            commit_hash: New commit hash
        """
        branch = self.get_current_branch()
        if branch:
            self.write_ref(f'refs/heads/{branch}', commit_hash)
        else:
            self.set_head(commit_hash, symbolic=False)

    def list_branches(self) -> List[Tuple[str, str]]:
        """
        List all branches.

        Returns:
            List of (branch_name, commit_hash) tuples sorted by name;
            commit_hash is '' for a branch without commits
        """
        if not self.heads_dir.exists():
            return []

        branches = []
        for branch_file in self.heads_dir.rglob('*'):
            if branch_file.is_file():
                branch_name = branch_file.relative_to(self.heads_dir).as_posix()
                branches.append((branch_name, branch_file.read_text().strip()))

        return sorted(branches, key=lambda x: x[0])

    def validate_branch_name(self, branch_name: str) -> None:
        """
        Reject names that cannot be stored as a ref.

        Raises:
            InvalidStateError: If the name is empty or malformed
        """
        if not branch_name or _INVALID_BRANCH_RE.search(branch_name):
            raise InvalidStateError(f"Invalid branch name: '{branch_name}'")

    def create_branch(self, branch_name: str, commit_hash: Optional[str] = None) -> str:
        """
        Create a new branch.

        Args:
            branch_name: Branch name
            commit_hash: Commit to point to (defaults to the HEAD commit)

        Returns:
            The commit hash the new branch points to

        Raises:
            InvalidStateError: If the branch exists, the name is invalid or
                there is no commit to start from
            NotFoundError: If commit_hash is not a stored commit
        """
        self.validate_branch_name(branch_name)

        if self.branch_exists(branch_name):
            raise InvalidStateError(f"Branch '{branch_name}' already exists")

        if commit_hash is None:
            commit_hash = self.resolve_head()
            if not commit_hash:
                raise InvalidStateError("Cannot create branch without any commits")

        self.write_ref(f'refs/heads/{branch_name}', commit_hash)
        logger.info(f"Created branch {branch_name} at {commit_hash[:7]}")
        return commit_hash

    def delete_branch(self, branch_name: str) -> None:
        """
        Delete a branch.

        Only the ref is removed; the commits it pointed to stay in the
        object store.

        Args:
            branch_name: Branch name

        Raises:
            NotFoundError: If the branch does not exist
            InvalidStateError: If it is the default or the current branch
        """
        if not self.branch_exists(branch_name):
            raise NotFoundError(f"Branch '{branch_name}' not found")

        if branch_name == self.repo.default_branch:
            raise InvalidStateError(f"Cannot delete the default branch '{branch_name}'")

        if branch_name == self.get_current_branch():
            raise InvalidStateError(f"Cannot delete the current branch '{branch_name}'")

        (self.heads_dir / branch_name).unlink()
        logger.info(f"Deleted branch {branch_name}")

    def find_commit_by_prefix(self, prefix: str) -> Optional[str]:
        """
        Find a commit whose hash starts with prefix.

        Returns:
            The full hash if exactly one commit matches, None otherwise
        """
        prefix = prefix.lower()
        matches = [
            h for h in self.repo.iter_object_hashes()
            if h.startswith(prefix) and isinstance(self.repo.read_object(h), Commit)
        ]
        if len(matches) == 1:
            return matches[0]
        return None

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve a reference (HEAD, branch, full or abbreviated hash) to a commit hash.

        Args:
            ref: Reference string (e.g., 'HEAD', 'master', 'abc1234')

        Returns:
            Commit hash or None if reference can't be resolved
        """
        if not ref:
            return None

        if ref == 'HEAD':
            return self.resolve_head()

        if self.branch_exists(ref):
            return self.read_ref(ref)

        if len(ref) >= 4 and all(c in '0123456789abcdef' for c in ref.lower()):
            if len(ref) == 40:
                if isinstance(self.repo.read_object(ref.lower()), Commit):
                    return ref.lower()
                return None
            return self.find_commit_by_prefix(ref)

        return None
