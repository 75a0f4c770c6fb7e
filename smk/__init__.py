"""Smk - a local, single-user version control engine implemented in Python."""

__version__ = '0.1.0'

from smk.core.repository import Repository
from smk.core.objects import SmkObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'SmkObject',
    'Blob',
    'Tree',
    'Commit',
]
