"""Shared pytest fixtures for Smk tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
from loguru import logger
from click.testing import CliRunner
from smk.core.config import Config
from smk.core.repository import Repository
from smk.core.objects import Blob, Tree, Commit
from smk.core.index import Index
from smk.operations.commit import create_commit


def write_file(repo, path, content):
    """Write a file into the work tree, creating directories as needed."""
    file_path = repo.work_tree / path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        file_path.write_bytes(content)
    else:
        file_path.write_text(content)
    return file_path


def stage_and_commit(repo, files, message="Test commit"):
    """
    Write files, stage them and commit.

    Args:
        repo: Repository instance
        files: Dict of {path: content}
        message: Commit message

    Returns:
        str: Commit hash
    """
    index = Index.load(repo)
    for path, content in files.items():
        index.add_file(repo, str(write_file(repo, path, content)))
    index.save(repo)
    return create_commit(repo, message)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep tests away from the real ~/.smkconfig and SMK_* variables."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.smkconfig')
    for name in ('SMK_USER_NAME', 'SMK_USER_EMAIL', 'SMK_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    yield
    # The CLI binds a sink to the runner's stderr, drop it between tests
    logger.remove()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def repo_with_config(repo):
    """Create a repository with config set."""
    repo.config_file.write_text("""[user]
\tname = Test User
\temail = test@example.com
""")
    return repo


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.write_object(sample_blob)
    tree = Tree()
    tree.add_entry('test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo):
    """Sample commit object."""
    tree_hash = repo.write_object(sample_tree)
    return Commit.create(
        tree_hash=tree_hash,
        parent_hashes=[],
        author="Test User <test@example.com>",
        message="Test commit",
        timestamp=1700000000
    )


@pytest.fixture
def repo_with_commits(repo_with_config):
    """
    Repository with two commits on master.

    The commit hashes are available as repo.commit_hashes, oldest first.
    """
    repo = repo_with_config
    first = stage_and_commit(repo, {'file1.txt': 'Hello, World!\n'}, "First commit")
    second = stage_and_commit(repo, {'file2.txt': 'Second file\n'}, "Second commit")
    repo.commit_hashes = [first, second]
    return repo


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_repo(repo_with_commits, monkeypatch):
    """repo_with_commits with the current directory set to its work tree."""
    monkeypatch.chdir(repo_with_commits.work_tree)
    return repo_with_commits
