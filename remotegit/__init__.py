"""
remotegit - Edit a remote git repository without a working copy.

remotegit keeps a bare, shallow, partial clone of a remote in a temporary
directory and exposes git's object model on top of it: read commits, trees
and blobs, write new objects, commit a tree and push the result back with
--force-with-lease protection.

Quick Start:
    from remotegit import Repository, File, TreeEntry

    with Repository("https://example.com/repo.git") as repo:
        repo.set_author("Jane Doe", "jane@example.com")

        branch = repo.get_branch("HEAD")
        parent = branch.get_commit()

        blob = repo.create_object("Hello\\n", File)
        entries = [e for e in branch.get_tree().list_entries() if e.name != "README"]
        entries.append(TreeEntry.for_object(blob, "README"))
        tree = repo.make_tree(entries)

        commit = repo.commit_tree(tree, "Update README", parent)
        repo.push_commit(commit, branch.name)

Domain Objects:
    Branch - Remote branch and its tip commit hash
    Commit, Tree, File - Content-addressed object handles
    TreeEntry - One entry of a tree

Infrastructure:
    GitExecutable - Runs the git binary
    TransientStore - Temporary directory holding the clone
"""

__version__ = "0.1.0"

from .repository import Repository

from .domain import (
    Branch,
    GitObject,
    Commit,
    Tree,
    File,
    Blob,
    TreeEntry,
)

from .infra import GitExecutable, TransientStore

from .exceptions import (
    RemoteGitError,
    GitCommandError,
    GitTimeoutError,
    GitExecutableNotFoundError,
    NoBranchesError,
    BranchNotFoundError,
    HeadResolutionError,
    InvalidObjectTypeError,
    MalformedObjectError,
    RepositoryClosedError,
)

from .config import load_config

__all__ = [
    "__version__",
    "Repository",
    "Branch",
    "GitObject",
    "Commit",
    "Tree",
    "File",
    "Blob",
    "TreeEntry",
    "GitExecutable",
    "TransientStore",
    "RemoteGitError",
    "GitCommandError",
    "GitTimeoutError",
    "GitExecutableNotFoundError",
    "NoBranchesError",
    "BranchNotFoundError",
    "HeadResolutionError",
    "InvalidObjectTypeError",
    "MalformedObjectError",
    "RepositoryClosedError",
    "load_config",
]
