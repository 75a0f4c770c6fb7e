"""Working tree status."""

from dataclasses import dataclass, field
from typing import List, Optional
from smk.core.index import Index
from smk.operations.commit import head_tree, iter_history, staged_snapshot


@dataclass
class StatusReport:
    """
    Snapshot of repository state.

    Staged paths are index entries that differ from HEAD. Unstaged paths
    are tracked files whose working content differs from the staged
    snapshot (HEAD tree plus index). Untracked files are working files
    the staged snapshot does not know about.

    Staged deletions only exist while a conflicted merge is pending: the
    index then holds the full merge result, so HEAD paths missing from it
    will be dropped by the next commit.
    """
    branch: Optional[str]
    head: Optional[str]
    commit_count: int = 0
    staged_new: List[str] = field(default_factory=list)
    staged_modified: List[str] = field(default_factory=list)
    staged_deleted: List[str] = field(default_factory=list)
    unstaged_modified: List[str] = field(default_factory=list)
    unstaged_deleted: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)
    merge_in_progress: bool = False

    @property
    def is_detached(self) -> bool:
        return self.branch is None

    @property
    def has_staged(self) -> bool:
        return bool(self.staged_new or self.staged_modified or self.staged_deleted)

    @property
    def has_unstaged(self) -> bool:
        return bool(self.unstaged_modified or self.unstaged_deleted)

    @property
    def is_clean(self) -> bool:
        """No staged or unstaged changes. Untracked files are ignored."""
        return not (self.has_staged or self.has_unstaged)


def compute_status(repo) -> StatusReport:
    """
    Compare HEAD, the index and the work tree.

    A path whose content is identical in all three appears in no category.

    Args:
        repo: Repository instance

    Returns:
        StatusReport
    """
    head = repo.refs.resolve_head()
    head_entries = head_tree(repo)
    index = Index.load(repo)
    working = repo.files.snapshot()

    report = StatusReport(
        branch=repo.refs.get_current_branch(),
        head=head,
        commit_count=sum(1 for _ in iter_history(repo, head)),
        merge_in_progress=repo.merge.is_merge_in_progress()
    )

    for path, blob_hash in index.items():
        if path not in head_entries:
            report.staged_new.append(path)
        elif head_entries[path] != blob_hash:
            report.staged_modified.append(path)

    snapshot = staged_snapshot(repo, index)
    if report.merge_in_progress:
        report.staged_deleted = sorted(path for path in head_entries if path not in snapshot)

    for path in sorted(snapshot):
        if path not in working:
            report.unstaged_deleted.append(path)
        elif working[path] != snapshot[path]:
            report.unstaged_modified.append(path)

    report.untracked = sorted(
        path for path in working
        if path not in snapshot and path not in report.staged_deleted
    )
    return report
