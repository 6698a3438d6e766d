"""
Domain layer for remotegit.

Contains lightweight handles with no state beyond a hash or name:
- Branch: A remote branch and its tip commit hash
- Commit, Tree, File: Content-addressed git objects
- TreeEntry: One entry of a tree listing

Every content read goes through the owning Repository.
"""

from .objects import (
    GitObject,
    Commit,
    Tree,
    File,
    Blob,
    TreeEntry,
    OBJECT_TYPES,
    resolve_object_type,
)
from .branch import Branch, REMOTE_REF_PREFIX

__all__ = [
    'GitObject',
    'Commit',
    'Tree',
    'File',
    'Blob',
    'TreeEntry',
    'OBJECT_TYPES',
    'resolve_object_type',
    'Branch',
    'REMOTE_REF_PREFIX',
]
