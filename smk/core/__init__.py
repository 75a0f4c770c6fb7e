"""Core functionality for Smk.

This module contains the core data structures:
- Smk objects (Blob, Tree, Commit)
- Repository management and the object store
- Index/staging area
- Reference management
- Configuration management
- Hashing utilities

For operations like commit, checkout, diff and merge, see smk.operations
"""

from smk.core.objects import SmkObject, Blob, Tree, Commit, parse_object
from smk.core.repository import Repository
from smk.core.hash import hash_object, hash_content, object_header
from smk.core.index import Index
from smk.core.refs import RefManager
from smk.core.config import Config, get_config
from smk.core.errors import SmkError, NotFoundError, InvalidStateError, RepositoryError

__all__ = [
    'SmkObject',
    'Blob',
    'Tree',
    'Commit',
    'parse_object',
    'Repository',
    'Index',
    'RefManager',
    'Config',
    'get_config',
    'hash_object',
    'hash_content',
    'object_header',
    'SmkError',
    'NotFoundError',
    'InvalidStateError',
    'RepositoryError',
]
