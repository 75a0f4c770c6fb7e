"""Unit tests for commit building and history."""

import pytest
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.index import Index
from smk.core.objects import Blob, Commit
from smk.operations.checkout import checkout_branch
from smk.operations.commit import (
    build_child_index, build_tree, create_commit, iter_history, read_tree,
    resolve_commit, write_commit,
)
from tests.conftest import stage_and_commit, write_file


class TestCreateCommit:
    """Tests for regular commits."""

    def test_first_commit(self, repo):
        """The first commit has no parent and advances master."""
        commit_hash = stage_and_commit(repo, {'a.txt': 'hi'}, 'first')
        commit = repo.read_object(commit_hash)

        assert commit.parents == []
        assert commit.message == 'first'
        assert repo.refs.read_ref('master') == commit_hash
        assert read_tree(repo, commit_hash) == {'a.txt': Blob(b'hi').hash}

    def test_index_cleared_after_commit(self, repo):
        """A successful commit empties the staging area."""
        stage_and_commit(repo, {'a.txt': 'hi'})
        assert len(Index.load(repo)) == 0
        assert repo.index_file.read_text() == ''

    def test_empty_commit_rejected(self, repo):
        """Nothing staged and nothing committed is an error with no state change."""
        with pytest.raises(InvalidStateError, match="Nothing to commit"):
            create_commit(repo, 'empty')
        assert repo.refs.resolve_head() is None
        assert list(repo.iter_object_hashes()) == []

    def test_commit_keeps_unchanged_files(self, repo_with_commits):
        """Files committed earlier stay in later snapshots."""
        repo = repo_with_commits
        assert set(read_tree(repo, repo.commit_hashes[-1])) == {'file1.txt', 'file2.txt'}

    def test_parent_is_previous_head(self, repo_with_commits):
        """Each commit links to the one before it."""
        first, second = repo_with_commits.commit_hashes
        assert repo_with_commits.read_object(second).parents == [first]

    def test_deleted_file_dropped(self, repo_with_commits):
        """Files removed from the work tree leave the next snapshot."""
        repo = repo_with_commits
        (repo.work_tree / 'file1.txt').unlink()
        commit_hash = stage_and_commit(repo, {'file2.txt': 'changed\n'}, 'drop file1')

        assert read_tree(repo, commit_hash) == {'file2.txt': Blob(b'changed\n').hash}

    def test_deletion_after_checkout(self, repo_with_commits):
        """A checkout fills the index with the whole tree; deleting a file still drops it."""
        repo = repo_with_commits
        repo.refs.create_branch('feature')
        checkout_branch(repo, 'feature')
        assert len(Index.load(repo)) == 2

        (repo.work_tree / 'file2.txt').unlink()
        commit_hash = create_commit(repo, 'drop file2')

        assert read_tree(repo, commit_hash) == {'file1.txt': Blob(b'Hello, World!\n').hash}

    def test_unstaged_edit_not_committed(self, repo_with_commits):
        """Working changes that were not added keep their committed content."""
        repo = repo_with_commits
        write_file(repo, 'file1.txt', 'edited but not staged\n')
        commit_hash = stage_and_commit(repo, {'new.txt': 'n'}, 'add new')

        assert read_tree(repo, commit_hash)['file1.txt'] == Blob(b'Hello, World!\n').hash

    def test_author_from_config(self, repo_with_commits):
        """The author string comes from the repository config."""
        commit = repo_with_commits.read_object(repo_with_commits.commit_hashes[0])
        assert commit.author == 'Test User <test@example.com>'

    def test_default_author(self, repo):
        """Without configuration the local identity is used."""
        commit_hash = stage_and_commit(repo, {'a.txt': 'a'})
        assert repo.read_object(commit_hash).author == 'Local User <local@smk>'

    def test_detached_head_commit(self, repo_with_commits):
        """With a detached HEAD the commit moves HEAD, not a branch."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        repo.refs.set_head(first, symbolic=False)

        commit_hash = stage_and_commit(repo, {'c.txt': 'c'}, 'detached work')

        assert repo.refs.resolve_head() == commit_hash
        assert repo.refs.read_ref('master') == second


class TestAmend:
    """Tests for amending the last commit."""

    def test_amend_without_commit(self, repo):
        """There is nothing to amend before the first commit."""
        with pytest.raises(InvalidStateError, match="No commit to amend"):
            create_commit(repo, 'fix', amend=True)

    def test_amend_replaces_head(self, repo_with_commits):
        """The amended commit starts from HEAD's parent and links to the grandparent."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        third = stage_and_commit(repo, {'file3.txt': 'third\n'}, 'Third commit')

        write_file(repo, 'file2.txt', 'amended\n')
        index = Index.load(repo)
        index.add_file(repo, str(repo.work_tree / 'file2.txt'))
        index.save(repo)

        amended = create_commit(repo, 'Third, amended', amend=True)
        commit = repo.read_object(amended)

        assert commit.parents == [first]
        assert commit.message == 'Third, amended'
        assert read_tree(repo, amended) == {
            'file1.txt': Blob(b'Hello, World!\n').hash,
            'file2.txt': Blob(b'amended\n').hash,
        }
        assert repo.refs.read_ref('master') == amended
        assert isinstance(repo.read_object(third), Commit)
        assert isinstance(repo.read_object(second), Commit)
        assert len(Index.load(repo)) == 0

    def test_amend_with_nothing_staged(self, repo_with_commits):
        """With an empty index the parent snapshot is used unchanged."""
        repo = repo_with_commits
        first, second = repo.commit_hashes

        amended = create_commit(repo, 'redo', amend=True)

        assert repo.read_object(amended).parents == []
        assert read_tree(repo, amended) == read_tree(repo, first)

    def test_amend_with_nothing_staged_keeps_parent_files(self, repo_with_commits):
        """Files the replaced commit deleted come back, even though the work tree lacks them."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        (repo.work_tree / 'file2.txt').unlink()
        create_commit(repo, 'Remove file2')

        amended = create_commit(repo, 'Remove file2, reworded', amend=True)

        assert repo.read_object(amended).parents == [first]
        assert read_tree(repo, amended) == read_tree(repo, second)
        assert not (repo.work_tree / 'file2.txt').exists()

    def test_amend_root_commit(self, repo):
        """Amending a root commit starts from an empty tree."""
        stage_and_commit(repo, {'a.txt': 'a'}, 'root')
        write_file(repo, 'b.txt', 'b')
        index = Index.load(repo)
        index.add_file(repo, str(repo.work_tree / 'b.txt'))
        index.save(repo)

        amended = create_commit(repo, 'root again', amend=True)

        assert repo.read_object(amended).parents == []
        assert read_tree(repo, amended) == {'b.txt': Blob(b'b').hash}


class TestBuilders:
    """Tests for the low-level tree and commit writers."""

    def test_build_tree_order_independent(self, repo):
        """Trees with the same entries hash the same."""
        h1 = build_tree(repo, {'b': '2' * 40, 'a': '1' * 40})
        h2 = build_tree(repo, {'a': '1' * 40, 'b': '2' * 40})
        assert h1 == h2

    def test_write_commit(self, repo):
        """write_commit stores a commit with the given fields."""
        tree_hash = build_tree(repo, {})
        commit_hash = write_commit(repo, 'msg', [], tree_hash, author='X <x@y>', timestamp=42)
        commit = repo.read_object(commit_hash)

        assert commit.tree == tree_hash
        assert commit.author == 'X <x@y>'
        assert commit.timestamp == 42

    def test_read_tree_unknown_commit(self, repo):
        """Reading the tree of a missing commit raises."""
        with pytest.raises(NotFoundError):
            read_tree(repo, '0' * 40)
        assert read_tree(repo, None) == {}


class TestHistory:
    """Tests for walking and indexing the commit graph."""

    def test_linear_history(self, repo_with_commits):
        """History runs from the tip back to the root."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        assert [h for h, _ in iter_history(repo, second)] == [second, first]
        assert list(iter_history(repo, None)) == []

    def test_diamond_visits_each_commit_once(self, repo):
        """Shared ancestors of a merge are visited exactly once."""
        tree_hash = build_tree(repo, {})
        root = write_commit(repo, 'root', [], tree_hash, author='a', timestamp=1)
        left = write_commit(repo, 'left', [root], tree_hash, author='a', timestamp=2)
        right = write_commit(repo, 'right', [root], tree_hash, author='a', timestamp=3)
        merge = write_commit(repo, 'merge', [left, right], tree_hash, author='a', timestamp=4)

        visited = [h for h, _ in iter_history(repo, merge)]

        assert visited == [merge, left, right, root]

    def test_resolve_commit(self, repo_with_commits):
        """Names resolve; unknown names raise."""
        repo = repo_with_commits
        assert resolve_commit(repo, 'master') == repo.commit_hashes[-1]
        with pytest.raises(NotFoundError):
            resolve_commit(repo, 'ghost')

    def test_build_child_index(self, repo_with_commits):
        """Children are found by reversing parent links."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        children = build_child_index(repo)

        assert children[first] == [second]
        assert second not in children
