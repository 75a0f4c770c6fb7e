"""Branch switching and tree materialization."""

from dataclasses import dataclass
from typing import Dict, Tuple
from loguru import logger
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.index import Index
from smk.core.objects import Blob
from smk.operations.commit import head_tree, read_tree, staged_snapshot


@dataclass
class CheckoutResult:
    """Outcome of switching branches."""
    branch: str
    commit_hash: str
    had_uncommitted_changes: bool = False
    files_written: int = 0
    files_removed: int = 0

    def __repr__(self) -> str:
        return f"CheckoutResult({self.branch} at {self.commit_hash[:7]})"


def has_uncommitted_changes(repo) -> bool:
    """
    Check for work that a checkout could overwrite.

    True when the index stages content that differs from HEAD, or when a
    tracked working file differs from (or is missing compared to) the staged
    snapshot. Untracked files do not count.
    """
    head_entries = head_tree(repo)
    index = Index.load(repo)

    for path, blob_hash in index.items():
        if head_entries.get(path) != blob_hash:
            return True

    for path, blob_hash in staged_snapshot(repo, index).items():
        if repo.files.hash_file(path) != blob_hash:
            return True

    return False


def checkout_tree(repo, old_entries: Dict[str, str], new_entries: Dict[str, str]) -> Tuple[int, int]:
    """
    Replace the files of one tree in the work tree with those of another.

    Files tracked by old_entries but absent from new_entries are removed,
    every file of new_entries is written, and the index is set to
    new_entries. Files that cannot be written or removed are skipped.

    Args:
        repo: Repository instance
        old_entries: Tree currently checked out
        new_entries: Tree to check out

    Returns:
        Tuple of (files written, files removed)
    """
    removed = 0
    for path in sorted(set(old_entries) - set(new_entries)):
        if repo.files.delete(path):
            removed += 1

    written = 0
    for path, blob_hash in sorted(new_entries.items()):
        blob = repo.read_object(blob_hash)
        if not isinstance(blob, Blob):
            logger.warning(f"Blob {blob_hash[:7]} for {path} not found, skipping")
            continue
        if repo.files.write(path, blob.data):
            written += 1

    Index(new_entries).save(repo)
    return written, removed


def checkout_branch(repo, branch_name: str) -> CheckoutResult:
    """
    Switch the work tree, index and HEAD to a branch.

    Uncommitted changes do not stop the checkout; they are logged and
    flagged on the result.

    Args:
        repo: Repository instance
        branch_name: Branch to check out

    Returns:
        CheckoutResult

    Raises:
        NotFoundError: If the branch does not exist
        InvalidStateError: If the branch has no commits or a merge is in progress
    """
    if repo.merge.is_merge_in_progress():
        raise InvalidStateError("Cannot switch branches while a merge is in progress; commit the resolution first")

    if not repo.refs.branch_exists(branch_name):
        raise NotFoundError(f"Branch '{branch_name}' not found")

    target = repo.refs.read_ref(branch_name)
    if not target:
        raise InvalidStateError(f"Branch '{branch_name}' has no commits")

    new_entries = read_tree(repo, target)

    dirty = has_uncommitted_changes(repo)
    if dirty:
        logger.warning(f"Uncommitted changes may be overwritten by checkout of {branch_name}")

    written, removed = checkout_tree(repo, head_tree(repo), new_entries)
    repo.refs.set_head(branch_name)

    logger.info(f"Switched to branch {branch_name} at {target[:7]}")
    return CheckoutResult(
        branch=branch_name,
        commit_hash=target,
        had_uncommitted_changes=dirty,
        files_written=written,
        files_removed=removed
    )
