"""Unit tests for work tree file access."""

from smk.core.objects import Blob
from tests.conftest import write_file


class TestWorkTree:
    """Tests for listing, hashing, writing and deleting working files."""

    def test_list_files_skips_hidden(self, repo):
        """The .smk directory and other hidden entries are not listed."""
        write_file(repo, 'b.txt', 'b')
        write_file(repo, 'dir/a.txt', 'a')
        write_file(repo, '.hidden', 'h')
        write_file(repo, '.cache/x.txt', 'x')

        assert repo.files.list_files() == ['b.txt', 'dir/a.txt']

    def test_hash_file(self, repo):
        """Working files hash like the blob they would become."""
        write_file(repo, 'a.txt', 'content')
        assert repo.files.hash_file('a.txt') == Blob(b'content').hash
        assert repo.files.hash_file('missing.txt') is None
        assert list(repo.iter_object_hashes()) == []

    def test_snapshot(self, repo):
        """snapshot() maps every working file to its blob hash."""
        write_file(repo, 'a.txt', 'a')
        write_file(repo, 'sub/b.txt', 'b')
        assert repo.files.snapshot() == {
            'a.txt': Blob(b'a').hash,
            'sub/b.txt': Blob(b'b').hash,
        }

    def test_write_creates_directories(self, repo):
        """Writing a nested path creates its parent directories."""
        assert repo.files.write('deep/nested/file.txt', b'data')
        assert (repo.work_tree / 'deep' / 'nested' / 'file.txt').read_bytes() == b'data'
        assert repo.files.read('deep/nested/file.txt') == b'data'

    def test_delete(self, repo):
        """Deleting removes the file; deleting a missing file is fine."""
        write_file(repo, 'a.txt', 'a')
        assert repo.files.delete('a.txt')
        assert not repo.files.exists('a.txt')
        assert repo.files.delete('a.txt')

    def test_unsafe_paths_are_skipped(self, repo):
        """Paths escaping the work tree or touching .smk are refused."""
        assert not repo.files.write('../escape.txt', b'x')
        assert not (repo.work_tree.parent / 'escape.txt').exists()
        assert not repo.files.write('.smk/HEAD', b'x')
        assert repo.head_file.read_text() == 'ref: refs/heads/master\n'
        assert not repo.files.delete('.smk/index')
        assert repo.index_file.exists()
