"""
Infrastructure layer for remotegit.

Contains abstractions for external systems:
- GitExecutable: git command execution
- TransientStore: temporary on-disk storage for the shadow clone

These provide clean interfaces that can be mocked for testing.
"""

from .git_executable import GitExecutable, find_git_executable
from .temp_store import TransientStore, remove_path

__all__ = [
    'GitExecutable',
    'find_git_executable',
    'TransientStore',
    'remove_path',
]
