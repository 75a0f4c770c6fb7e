"""Tree and commit building, plus commit history traversal."""

from collections import deque
from typing import Dict, Iterator, List, Optional, Tuple
from loguru import logger
from smk.core.config import get_config
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.index import Index
from smk.core.objects import Commit, Tree


def read_tree(repo, commit_hash: Optional[str]) -> Dict[str, str]:
    """
    Get the file mapping of a commit's tree.

    Args:
        repo: Repository instance
        commit_hash: Commit hash, or None for "no commit"

    Returns:
        Dict mapping path to blob hash (empty when commit_hash is None)

    Raises:
        NotFoundError: If commit_hash is not a stored commit
    """
    if not commit_hash:
        return {}

    commit = repo.read_object(commit_hash)
    if not isinstance(commit, Commit):
        raise NotFoundError(f"Commit not found: {commit_hash}")

    tree = repo.read_object(commit.tree)
    if not isinstance(tree, Tree):
        raise NotFoundError(f"Tree {commit.tree[:7]} of commit {commit_hash[:7]} not found")

    return dict(tree.entries)


def head_tree(repo) -> Dict[str, str]:
    """File mapping of the HEAD commit, empty before the first commit."""
    return read_tree(repo, repo.refs.resolve_head())


def staged_snapshot(repo, index: Optional[Index] = None) -> Dict[str, str]:
    """
    The tree the next commit would record if the work tree were unchanged.

    This is the HEAD tree overlaid with the index entries. While a
    conflicted merge is pending the index holds the whole merge result
    and is the snapshot on its own.
    """
    if index is None:
        index = Index.load(repo)
    if repo.merge.is_merge_in_progress():
        return dict(index.entries)
    snapshot = head_tree(repo)
    snapshot.update(index.entries)
    return snapshot


def build_tree(repo, entries: Dict[str, str]) -> str:
    """
    Store a tree built from a path to blob hash mapping.

    Returns:
        Hash of the stored tree
    """
    return repo.write_object(Tree(entries))


def write_commit(
    repo,
    message: str,
    parents: List[str],
    tree_hash: str,
    author: Optional[str] = None,
    timestamp: Optional[int] = None
) -> str:
    """
    Store a commit object.

    Args:
        repo: Repository instance
        message: Commit message
        parents: Parent commit hashes (zero to two)
        tree_hash: Hash of the commit's tree
        author: Author string, read from config when omitted
        timestamp: Unix seconds, defaults to now

    Returns:
        Hash of the stored commit
    """
    if author is None:
        author = get_config(repo).author()

    commit = Commit.create(
        tree_hash=tree_hash,
        parent_hashes=parents,
        author=author,
        message=message,
        timestamp=timestamp
    )
    return repo.write_object(commit)


def _snapshot_from(repo, base: Dict[str, str], index: Index) -> Dict[str, str]:
    # Staged entries win, then anything missing from the work tree drops out
    entries = dict(base)
    entries.update(index.entries)
    return {path: h for path, h in entries.items() if repo.files.exists(path)}


def create_commit(repo, message: str, amend: bool = False) -> str:
    """
    Record the staged changes as a new commit on HEAD.

    A regular commit starts from the HEAD tree. An amend starts from the
    tree of HEAD's parent and replaces HEAD, so the new commit's parent is
    HEAD's grandparent; the replaced commit stays in the store.

    While a conflicted merge is pending, the index already holds the full
    merge result; it is committed as is, with MERGE_HEAD as second parent.

    Args:
        repo: Repository instance
        message: Commit message
        amend: Replace the HEAD commit instead of adding a child

    Returns:
        Hash of the new commit

    Raises:
        InvalidStateError: If there is nothing to commit, or nothing to amend
    """
    index = Index.load(repo)
    head = repo.refs.resolve_head()
    merge_head = repo.merge.get_merge_head()

    if amend:
        if not head:
            raise InvalidStateError("No commit to amend")
        if merge_head:
            raise InvalidStateError("Cannot amend while a merge is in progress")

        head_commit = repo.read_object(head)
        if not isinstance(head_commit, Commit):
            raise NotFoundError(f"Commit not found: {head}")
        parent = head_commit.parents[0] if head_commit.parents else None
        if len(index):
            entries = _snapshot_from(repo, read_tree(repo, parent), index)
        else:
            entries = read_tree(repo, parent)

        parents = []
        if parent:
            parent_commit = repo.read_object(parent)
            if isinstance(parent_commit, Commit) and parent_commit.parents:
                parents = [parent_commit.parents[0]]
    else:
        if merge_head:
            # The index holds the whole provisional merge tree
            entries = dict(index.entries)
        else:
            entries = _snapshot_from(repo, read_tree(repo, head), index)
        if not entries:
            raise InvalidStateError("Nothing to commit")

        parents = [head] if head else []
        if merge_head:
            parents.append(merge_head)

    tree_hash = build_tree(repo, entries)
    commit_hash = write_commit(repo, message, parents, tree_hash)

    repo.refs.update_head(commit_hash)
    index.clear()
    index.save(repo)

    if merge_head:
        repo.merge.clear_merge_state()

    action = 'Amended' if amend else 'Created'
    logger.info(f"{action} commit {commit_hash[:7]} with {len(entries)} file(s)")
    return commit_hash


def iter_history(repo, start: Optional[str]) -> Iterator[Tuple[str, Commit]]:
    """
    Walk the commit graph breadth-first from a tip.

    Every parent edge is followed, so both sides of a merge are visited.
    Each reachable commit is yielded exactly once.

    Args:
        repo: Repository instance
        start: Commit hash to start from (None yields nothing)

    Yields:
        (commit hash, Commit) tuples
    """
    if not start:
        return

    queue = deque([start])
    visited = set()

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)

        commit = repo.read_object(current)
        if not isinstance(commit, Commit):
            logger.warning(f"Commit {current[:7]} missing from object store")
            continue

        yield current, commit

        for parent in commit.parents:
            if parent not in visited:
                queue.append(parent)


def resolve_commit(repo, ref: str) -> str:
    """
    Resolve HEAD, a branch name or a (possibly abbreviated) hash.

    Raises:
        NotFoundError: If ref names no commit
    """
    commit_hash = repo.refs.resolve_reference(ref)
    if not commit_hash:
        raise NotFoundError(f"Not a valid commit or reference: {ref}")
    return commit_hash


def build_child_index(repo) -> Dict[str, List[str]]:
    """
    Build the parent to children adjacency of the commit graph.

    Covers every commit reachable from a branch tip or HEAD. Nothing is
    persisted; the map is rebuilt on each call.

    Returns:
        Dict mapping commit hash to the hashes of its children
    """
    tips = [h for _, h in repo.refs.list_branches() if h]
    head = repo.refs.resolve_head()
    if head:
        tips.append(head)

    children: Dict[str, List[str]] = {}
    seen = set()
    for tip in tips:
        for commit_hash, commit in iter_history(repo, tip):
            if commit_hash in seen:
                continue
            seen.add(commit_hash)
            for parent in commit.parents:
                children.setdefault(parent, []).append(commit_hash)

    return children
