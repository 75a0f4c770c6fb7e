"""Merge operations for Smk."""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple
from loguru import logger
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.index import Index
from smk.core.objects import Commit
from smk.operations.checkout import checkout_tree
from smk.operations.commit import build_tree, read_tree, write_commit


@dataclass
class MergeConflict:
    """A path that both sides changed in incompatible ways."""
    path: str
    base_hash: Optional[str]
    ours_hash: Optional[str]
    theirs_hash: Optional[str]
    reason: str = 'both modified'

    def __repr__(self) -> str:
        """String representation."""
        return f"MergeConflict({self.path}, {self.reason})"


@dataclass
class MergeResult:
    """Result of a merge operation."""
    success: bool
    conflicts: List[MergeConflict] = field(default_factory=list)
    merged_tree_hash: Optional[str] = None
    commit_hash: Optional[str] = None
    is_fast_forward: bool = False
    up_to_date: bool = False
    message: str = ""

    def __repr__(self) -> str:
        """String representation."""
        if self.success:
            if self.up_to_date:
                return "MergeResult(up-to-date)"
            if self.is_fast_forward:
                return "MergeResult(fast-forward, conflicts=0)"
            return f"MergeResult(success, conflicts={len(self.conflicts)})"
        return f"MergeResult(failed, conflicts={len(self.conflicts)})"


def merge_trees(
    base_files: Dict[str, str],
    ours_files: Dict[str, str],
    theirs_files: Dict[str, str]
) -> Tuple[Dict[str, str], List[MergeConflict]]:
    """
    Merge file mappings using three-way merge logic.

    Every path is resolved; conflicts do not stop the merge. A conflicted
    path keeps our version in the merged mapping, except when we deleted it,
    in which case their modified version is kept.

    Args:
        base_files: Files in base (common ancestor)
        ours_files: Files in our branch
        theirs_files: Files in their branch

    Returns:
        Tuple of (merged_files, conflicts)
    """
    merged_files: Dict[str, str] = {}
    conflicts: List[MergeConflict] = []

    all_paths = set(base_files) | set(ours_files) | set(theirs_files)

    for path in sorted(all_paths):
        base = base_files.get(path)
        ours = ours_files.get(path)
        theirs = theirs_files.get(path)

        if base is None:
            if ours is not None and theirs is not None and ours != theirs:
                conflicts.append(MergeConflict(path, base, ours, theirs, 'both added'))
            picked = ours if ours is not None else theirs
            if picked is not None:
                merged_files[path] = picked
            continue

        if ours == theirs:
            # Same change on both sides, or deleted on both
            if ours is not None:
                merged_files[path] = ours
        elif ours == base:
            if theirs is not None:
                merged_files[path] = theirs
        elif theirs == base:
            if ours is not None:
                merged_files[path] = ours
        elif ours is None:
            conflicts.append(MergeConflict(path, base, ours, theirs, 'deleted by us'))
            merged_files[path] = theirs
        elif theirs is None:
            conflicts.append(MergeConflict(path, base, ours, theirs, 'deleted by them'))
            merged_files[path] = ours
        else:
            conflicts.append(MergeConflict(path, base, ours, theirs, 'both modified'))
            merged_files[path] = ours

    return merged_files, conflicts


class MergeEngine:
    """
    Handles merge operations for Smk.

    Supports:
    - Fast-forward merges
    - Three-way merges
    - Common ancestor discovery
    - Conflict detection, leaving the provisional result in the index
    """

    def __init__(self, repo):
        """
        Initialize merge engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def _bfs(self, start: str):
        queue = deque([start])
        visited: Set[str] = set()

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            yield current

            commit = self.repo.read_object(current)
            if isinstance(commit, Commit):
                queue.extend(p for p in commit.parents if p not in visited)

    def get_ancestors(self, commit_hash: str) -> Set[str]:
        """
        Get all ancestors of a commit.

        Args:
            commit_hash: Starting commit hash

        Returns:
            Set of ancestor commit hashes (including the commit itself)
        """
        return set(self._bfs(commit_hash))

    def find_common_ancestor(self, current_hash: str, target_hash: str) -> Optional[str]:
        """
        Find a common ancestor of two commits.

        All ancestors of current are collected first; then the history of
        target is walked breadth-first and the first commit already in
        that set is returned. When several common ancestors exist at
        different depths, discovery order decides, so the result is not
        necessarily the nearest one.

        Args:
            current_hash: Current commit hash
            target_hash: Target commit hash

        Returns:
            Hash of the common ancestor, or None if the histories are disjoint
        """
        ancestors = self.get_ancestors(current_hash)
        for commit_hash in self._bfs(target_hash):
            if commit_hash in ancestors:
                return commit_hash
        return None

    def fast_forward(self, current_hash: str, target_hash: str) -> MergeResult:
        """
        Move the current branch to a descendant commit.

        The target tree replaces the work tree and index. No commit is
        created.

        Args:
            current_hash: Current commit hash
            target_hash: Target commit hash

        Returns:
            MergeResult indicating success
        """
        target_files = read_tree(self.repo, target_hash)
        checkout_tree(self.repo, read_tree(self.repo, current_hash), target_files)
        self.repo.refs.update_head(target_hash)

        logger.info(f"Fast-forward {current_hash[:7]}..{target_hash[:7]}")
        return MergeResult(
            success=True,
            commit_hash=target_hash,
            is_fast_forward=True,
            message=f"Fast-forward to {target_hash[:7]}"
        )

    def three_way_merge(
        self,
        base_hash: Optional[str],
        ours_hash: str,
        theirs_hash: str,
        theirs_branch: Optional[str] = None
    ) -> MergeResult:
        """
        Perform a three-way merge.

        Merges changes from 'theirs' into 'ours' based on common ancestor
        'base'. Without a base every path is treated as added on each side.

        On conflicts nothing is committed and the work tree is left alone:
        the provisional merge is written to the index and MERGE_HEAD is set
        so the next commit records both parents. Otherwise the merged tree
        is checked out and committed with parents (ours, theirs).

        Args:
            base_hash: Common ancestor commit hash, or None
            ours_hash: Our current commit hash
            theirs_hash: Their commit hash to merge in
            theirs_branch: Name of the branch being merged in (for messages)

        Returns:
            MergeResult with success status and any conflicts
        """
        ours_files = read_tree(self.repo, ours_hash)
        merged_files, conflicts = merge_trees(
            read_tree(self.repo, base_hash),
            ours_files,
            read_tree(self.repo, theirs_hash)
        )
        name = theirs_branch or theirs_hash[:7]

        if conflicts:
            Index(merged_files).save(self.repo)
            self.save_merge_state(theirs_hash)
            logger.warning(f"Merge of {name} stopped with {len(conflicts)} conflict(s)")
            return MergeResult(
                success=False,
                conflicts=conflicts,
                message=f"Merge conflicts in {len(conflicts)} file(s)"
            )

        tree_hash = build_tree(self.repo, merged_files)
        checkout_tree(self.repo, ours_files, merged_files)
        commit_hash = write_commit(
            self.repo, f"Merge branch '{name}'", [ours_hash, theirs_hash], tree_hash
        )
        self.repo.refs.update_head(commit_hash)

        logger.info(f"Merged {name} ({theirs_hash[:7]}) as {commit_hash[:7]}")
        return MergeResult(
            success=True,
            merged_tree_hash=tree_hash,
            commit_hash=commit_hash,
            message=f"Merged {theirs_hash[:7]} into {ours_hash[:7]}"
        )

    def save_merge_state(self, theirs_hash: str) -> None:
        """Record the commit being merged while conflicts are resolved."""
        self.repo.merge_head_file.write_text(theirs_hash + '\n')

    def clear_merge_state(self) -> None:
        """Clear merge state files."""
        if self.repo.merge_head_file.exists():
            self.repo.merge_head_file.unlink()

    def is_merge_in_progress(self) -> bool:
        """Check if a conflicted merge is waiting for a commit."""
        return self.repo.merge_head_file.exists()

    def get_merge_head(self) -> Optional[str]:
        """Get the commit hash being merged (from MERGE_HEAD)."""
        if self.repo.merge_head_file.exists():
            return self.repo.merge_head_file.read_text().strip() or None
        return None

    def merge(self, target_branch: str) -> MergeResult:
        """
        Merge target branch into the current HEAD.

        The target branch ref is never modified.

        Args:
            target_branch: Name of branch to merge

        Returns:
            MergeResult with status and any conflicts

        Raises:
            InvalidStateError: If HEAD has no commit or a merge is in progress
            NotFoundError: If the branch does not exist or has no commits
        """
        if self.is_merge_in_progress():
            raise InvalidStateError("A merge is already in progress; commit the resolution first")

        current_hash = self.repo.refs.resolve_head()
        if not current_hash:
            raise InvalidStateError("No commits on current branch")

        if not self.repo.refs.branch_exists(target_branch):
            raise NotFoundError(f"Branch '{target_branch}' not found")

        target_hash = self.repo.refs.read_ref(target_branch)
        if not target_hash:
            raise NotFoundError(f"Branch '{target_branch}' has no commits")

        if current_hash == target_hash:
            return MergeResult(success=True, up_to_date=True, message="Already up to date")

        merge_base = self.find_common_ancestor(current_hash, target_hash)

        if merge_base == current_hash:
            return self.fast_forward(current_hash, target_hash)

        if merge_base == target_hash:
            return MergeResult(success=True, up_to_date=True, message="Already up to date")

        if merge_base is None:
            logger.warning(f"No common ancestor with {target_branch}, merging against an empty base")

        return self.three_way_merge(merge_base, current_hash, target_hash, theirs_branch=target_branch)
