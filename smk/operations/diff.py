"""Diff engine for comparing files, trees and commits."""

from typing import Dict, List, Optional
from colorama import Fore, Style
from smk.core.index import Index
from smk.core.objects import Blob
from smk.operations.commit import head_tree, read_tree, staged_snapshot

CONTENT_DIFFERENCES_NOTE = '(content differences)'


def positional_diff(old_text: str, new_text: str) -> List[str]:
    """
    Compare two texts line by line at equal positions.

    Line i of the old text is compared with line i of the new text only.
    This is linear in the number of lines and does not look for moved or
    inserted blocks, so an insertion near the top shows every later line
    as changed.

    Args:
        old_text: Old content
        new_text: New content

    Returns:
        Lines prefixed with '-' (old) or '+' (new)
    """
    old_lines = old_text.splitlines()
    new_lines = new_text.splitlines()

    lines = []
    for i in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[i] if i < len(old_lines) else None
        new_line = new_lines[i] if i < len(new_lines) else None

        if old_line == new_line:
            continue
        if old_line is not None:
            lines.append(f"-{old_line}")
        if new_line is not None:
            lines.append(f"+{new_line}")

    return lines


class FileDiff:
    """Represents the diff for a single file."""

    def __init__(self, path: str, old_content: Optional[bytes], new_content: Optional[bytes]):
        self.path = path
        self.old_content = old_content
        self.new_content = new_content
        self.is_new = old_content is None
        self.is_deleted = new_content is None
        self.is_modified = old_content is not None and new_content is not None
        self.lines: List[str] = []
        self.note = ''

    @property
    def change(self) -> str:
        """One of 'added', 'deleted' or 'modified'."""
        if self.is_new:
            return 'added'
        if self.is_deleted:
            return 'deleted'
        return 'modified'

    def compute_diff(self) -> None:
        """Compute the changed lines for this file."""
        old_text = (self.old_content or b'').decode('utf-8', errors='replace')
        new_text = (self.new_content or b'').decode('utf-8', errors='replace')

        self.lines = positional_diff(old_text, new_text)
        if not self.lines:
            # Line endings or a trailing newline changed, or an empty file
            self.note = CONTENT_DIFFERENCES_NOTE

    def __repr__(self) -> str:
        return f"FileDiff({self.path}, {self.change}, lines={len(self.lines)})"


class DiffEngine:
    """
    Engine for computing diffs between the work tree, the staged snapshot,
    trees and commits.
    """

    def __init__(self, repo):
        """
        Initialize diff engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def diff_blobs(self, path: str, old_content: Optional[bytes], new_content: Optional[bytes]) -> FileDiff:
        """
        Compute diff between two contents.

        Args:
            path: File path
            old_content: Old file content (None for new files)
            new_content: New file content (None for deleted files)

        Returns:
            FileDiff object
        """
        file_diff = FileDiff(path, old_content, new_content)
        file_diff.compute_diff()
        return file_diff

    def _blob_content(self, blob_hash: Optional[str]) -> Optional[bytes]:
        if not blob_hash:
            return None
        blob = self.repo.read_object(blob_hash)
        if isinstance(blob, Blob):
            return blob.data
        return None

    def diff_trees(self, old_tree_files: Dict[str, str], new_tree_files: Dict[str, str]) -> List[FileDiff]:
        """
        Compute diff between two trees.

        Args:
            old_tree_files: Dict of {path: blob_hash} for old tree
            new_tree_files: Dict of {path: blob_hash} for new tree

        Returns:
            List of FileDiff objects sorted by path
        """
        diffs = []

        for path in sorted(set(old_tree_files) | set(new_tree_files)):
            old_hash = old_tree_files.get(path)
            new_hash = new_tree_files.get(path)

            if old_hash == new_hash:
                continue

            diffs.append(self.diff_blobs(
                path, self._blob_content(old_hash), self._blob_content(new_hash)
            ))

        return diffs

    def diff_commits(self, old_commit_hash: str, new_commit_hash: str) -> List[FileDiff]:
        """
        Compute diff between two commits.

        Raises:
            NotFoundError: If either hash is not a stored commit
        """
        old_files = read_tree(self.repo, old_commit_hash)
        new_files = read_tree(self.repo, new_commit_hash)
        return self.diff_trees(old_files, new_files)

    def _diff_against_work_tree(self, tracked: Dict[str, str]) -> List[FileDiff]:
        diffs = []
        files = self.repo.files

        for path in sorted(tracked):
            if files.hash_file(path) == tracked[path]:
                continue
            diffs.append(self.diff_blobs(
                path, self._blob_content(tracked[path]), files.read(path)
            ))

        return diffs

    def diff_unstaged(self) -> List[FileDiff]:
        """
        Changes in the work tree that are not staged.

        Compares every tracked path of the staged snapshot (HEAD tree plus
        index) with the working file. Untracked files are not reported.
        """
        return self._diff_against_work_tree(staged_snapshot(self.repo))

    def diff_head(self) -> List[FileDiff]:
        """
        All changes in the work tree since the HEAD commit.

        Files that are staged but not yet committed show up as added.
        """
        tracked = head_tree(self.repo)
        diffs = self._diff_against_work_tree(tracked)

        files = self.repo.files
        for path, _ in Index.load(self.repo).items():
            if path in tracked or not files.exists(path):
                continue
            diffs.append(self.diff_blobs(path, None, files.read(path)))

        return sorted(diffs, key=lambda d: d.path)

    def format_diff(self, diffs: List[FileDiff], color: bool = True) -> str:
        """
        Format diffs for display.

        Args:
            diffs: List of FileDiff objects
            color: Whether to use color output

        Returns:
            Formatted diff string
        """
        labels = {'added': 'new file', 'deleted': 'deleted file', 'modified': 'modified'}
        output = []

        for diff in diffs:
            header = f"diff -- {diff.path} ({labels[diff.change]})"
            output.append(f"{Style.BRIGHT}{header}{Style.RESET_ALL}" if color else header)

            for line in diff.lines:
                if color and line.startswith('+'):
                    output.append(f"{Fore.GREEN}{line}{Style.RESET_ALL}")
                elif color and line.startswith('-'):
                    output.append(f"{Fore.RED}{line}{Style.RESET_ALL}")
                else:
                    output.append(line)

            if diff.note:
                output.append(f"{Fore.CYAN}{diff.note}{Style.RESET_ALL}" if color else diff.note)

        return '\n'.join(output)
