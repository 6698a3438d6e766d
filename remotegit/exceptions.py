"""
Exception classes for remotegit.

Three families of failure exist:
- Execution failures: the git binary exited nonzero (or could not run)
- Resolution failures: a branch, HEAD or object type could not be resolved
- Lifecycle failures: the repository was used after it was closed
"""

from typing import List, Optional


class RemoteGitError(Exception):
    """Base exception for all remotegit errors."""

    pass


class GitCommandError(RemoteGitError):
    """Raised when a git command exits with a nonzero status."""

    def __init__(
        self,
        args: List[str],
        returncode: int,
        stderr: str = "",
        stdout: bytes = b"",
    ):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        message = f"git {' '.join(self.command)} failed with exit code {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class GitTimeoutError(GitCommandError):
    """Raised when a git command does not finish within the configured timeout."""

    def __init__(self, args: List[str], timeout: float):
        self.timeout = timeout
        super().__init__(args, -1, f"timed out after {timeout} seconds")


class GitExecutableNotFoundError(RemoteGitError):
    """Raised when no git binary can be located."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        if path:
            super().__init__(f"git executable not found at {path}")
        else:
            super().__init__("Unable to find a git executable on PATH")


class NoBranchesError(RemoteGitError):
    """Raised when the remote has no branches to list."""

    def __init__(self, url: str = ""):
        self.url = url
        super().__init__(f"Unable to list branches of {url}" if url else "Unable to list branches")


class BranchNotFoundError(RemoteGitError, KeyError):
    """Raised when a requested branch does not exist on the remote."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unable to find branch {name}")

    def __str__(self) -> str:
        return self.args[0]


class HeadResolutionError(RemoteGitError):
    """Raised when the remote default branch cannot be determined."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Unable to get HEAD branch, got {ref!r}")


class InvalidObjectTypeError(RemoteGitError, ValueError):
    """Raised for an object type that is not commit, tree or blob."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Object type must be one of Commit, Tree, File or "
            f"'commit', 'tree', 'blob'; {value!r} given"
        )


class MalformedObjectError(RemoteGitError, ValueError):
    """Raised when object content lacks a field git always records."""

    def __init__(self, object_hash: str, field: str):
        self.object_hash = object_hash
        self.field = field
        super().__init__(f"Object {object_hash} has no {field} header")


class RepositoryClosedError(RemoteGitError):
    """Raised when a closed repository is used."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Repository at {path} has been closed")
