"""Unit tests for reference management."""

import pytest
from smk.core.errors import InvalidStateError, NotFoundError
from smk.core.objects import Commit


class TestBranches:
    """Tests for creating, listing and deleting branches."""

    def test_default_branch_without_commits(self, repo):
        """master exists at init but points at nothing."""
        assert repo.refs.branch_exists('master')
        assert repo.refs.read_ref('master') is None
        assert repo.refs.list_branches() == [('master', '')]

    def test_create_branch_without_commits(self, repo):
        """A branch needs a commit to start from."""
        with pytest.raises(InvalidStateError):
            repo.refs.create_branch('feature')
        assert not repo.refs.branch_exists('feature')

    def test_create_branch_at_head(self, repo_with_commits):
        """A new branch points at the HEAD commit."""
        repo = repo_with_commits
        head = repo.refs.resolve_head()

        assert repo.refs.create_branch('feature') == head
        assert (repo.heads_dir / 'feature').read_text() == head + '\n'
        assert repo.refs.read_ref('refs/heads/feature') == head

    def test_create_existing_branch(self, repo_with_commits):
        """Creating a branch twice fails."""
        repo_with_commits.refs.create_branch('feature')
        with pytest.raises(InvalidStateError, match="already exists"):
            repo_with_commits.refs.create_branch('feature')

    @pytest.mark.parametrize('name', ['', 'has space', '-leading', 'a..b', 'HEAD', 'trailing/', 'x~1'])
    def test_invalid_branch_names(self, repo_with_commits, name):
        """Names that cannot be stored as refs are rejected."""
        with pytest.raises(InvalidStateError, match="Invalid branch name"):
            repo_with_commits.refs.create_branch(name)

    def test_list_branches_sorted(self, repo_with_commits):
        """Branches are listed by name with their commit hash."""
        repo = repo_with_commits
        head = repo.refs.resolve_head()
        repo.refs.create_branch('zeta')
        repo.refs.create_branch('alpha')

        assert repo.refs.list_branches() == [('alpha', head), ('master', head), ('zeta', head)]

    def test_delete_branch(self, repo_with_commits):
        """Deleting removes the ref but keeps the commits."""
        repo = repo_with_commits
        head = repo.refs.create_branch('feature')
        repo.refs.delete_branch('feature')

        assert not repo.refs.branch_exists('feature')
        assert isinstance(repo.read_object(head), Commit)

    def test_delete_default_branch(self, repo_with_commits):
        """The default branch is protected."""
        with pytest.raises(InvalidStateError, match="default"):
            repo_with_commits.refs.delete_branch('master')

    def test_delete_current_branch(self, repo_with_commits):
        """The checked-out branch is protected."""
        repo = repo_with_commits
        repo.refs.create_branch('feature')
        repo.refs.set_head('feature')

        with pytest.raises(InvalidStateError, match="current"):
            repo.refs.delete_branch('feature')
        assert repo.refs.branch_exists('feature')

    def test_delete_unknown_branch(self, repo):
        """Unknown branches cannot be deleted."""
        with pytest.raises(NotFoundError):
            repo.refs.delete_branch('ghost')


class TestHead:
    """Tests for HEAD handling."""

    def test_symbolic_head(self, repo_with_commits):
        """HEAD follows the current branch."""
        repo = repo_with_commits
        assert repo.refs.get_current_branch() == 'master'
        assert not repo.refs.is_detached_head()
        assert repo.refs.resolve_head() == repo.commit_hashes[-1]

    def test_set_head_unknown_branch(self, repo):
        """HEAD cannot point at a missing branch."""
        with pytest.raises(NotFoundError):
            repo.refs.set_head('ghost')
        assert repo.refs.get_current_branch() == 'master'

    def test_detached_head(self, repo_with_commits):
        """A bare hash in HEAD is a detached HEAD."""
        repo = repo_with_commits
        first, second = repo.commit_hashes
        repo.refs.set_head(first, symbolic=False)

        assert repo.refs.is_detached_head()
        assert repo.refs.get_current_branch() is None
        assert repo.refs.resolve_head() == first

        repo.refs.update_head(second)
        assert repo.head_file.read_text() == second + '\n'
        assert repo.refs.read_ref('master') == second

    def test_update_head_moves_branch(self, repo_with_commits):
        """On a branch, update_head moves the branch ref."""
        repo = repo_with_commits
        first = repo.commit_hashes[0]
        repo.refs.update_head(first)

        assert repo.refs.read_ref('master') == first
        assert repo.head_file.read_text() == 'ref: refs/heads/master\n'

    def test_write_ref_requires_commit(self, repo_with_commits):
        """Refs only point at stored commits."""
        with pytest.raises(NotFoundError):
            repo_with_commits.refs.write_ref('refs/heads/bad', '0' * 40)


class TestResolveReference:
    """Tests for turning user input into commit hashes."""

    def test_resolve_names(self, repo_with_commits):
        """HEAD and branch names resolve to their commit."""
        repo = repo_with_commits
        head = repo.commit_hashes[-1]
        assert repo.refs.resolve_reference('HEAD') == head
        assert repo.refs.resolve_reference('master') == head

    def test_resolve_hashes(self, repo_with_commits):
        """Full hashes and unique prefixes resolve."""
        repo = repo_with_commits
        first = repo.commit_hashes[0]
        assert repo.refs.resolve_reference(first) == first
        assert repo.refs.resolve_reference(first[:10]) == first

    def test_resolve_unknown(self, repo_with_commits):
        """Unknown names, short prefixes and non-commit hashes give None."""
        repo = repo_with_commits
        tree_hash = repo.read_object(repo.commit_hashes[0]).tree
        assert repo.refs.resolve_reference('nope') is None
        assert repo.refs.resolve_reference(repo.commit_hashes[0][:3]) is None
        assert repo.refs.resolve_reference(tree_hash) is None
        assert repo.refs.resolve_reference('') is None
