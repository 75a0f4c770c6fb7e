"""Operations module for high-level Smk operations.

This module contains the business logic for Smk operations like:
- Commit building and history
- Checkout logic
- Diff computation
- Merge algorithms
- Status computation
"""

from smk.operations.worktree import WorkTree
from smk.operations.commit import (
    build_tree, write_commit, create_commit, read_tree, head_tree,
    staged_snapshot, iter_history, resolve_commit, build_child_index,
)
from smk.operations.checkout import CheckoutResult, checkout_branch, checkout_tree, has_uncommitted_changes
from smk.operations.diff import DiffEngine, FileDiff, positional_diff
from smk.operations.merge import MergeEngine, MergeResult, MergeConflict, merge_trees
from smk.operations.status import StatusReport, compute_status

__all__ = [
    'WorkTree',
    'build_tree', 'write_commit', 'create_commit', 'read_tree', 'head_tree',
    'staged_snapshot', 'iter_history', 'resolve_commit', 'build_child_index',
    'CheckoutResult', 'checkout_branch', 'checkout_tree', 'has_uncommitted_changes',
    'DiffEngine', 'FileDiff', 'positional_diff',
    'MergeEngine', 'MergeResult', 'MergeConflict', 'merge_trees',
    'StatusReport', 'compute_status',
]
