"""
Git executable wrapper for remotegit.

Every git invocation made by remotegit goes through GitExecutable, making
command execution:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the orchestration logic in Repository
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from ..exceptions import GitCommandError, GitExecutableNotFoundError, GitTimeoutError

logger = logging.getLogger(__name__)


def find_git_executable() -> str:
    """
    Locate the git binary on PATH.

    Returns:
        Absolute path to git

    Raises:
        GitExecutableNotFoundError: if git is not installed
    """
    path = shutil.which("git")
    if path is None:
        raise GitExecutableNotFoundError()
    return path


class GitExecutable:
    """
    A git binary plus the policy used to run it.

    Arguments are always passed as a list, never through a shell, so values
    such as commit messages or URLs containing spaces arrive untouched.

    Example:
        git = GitExecutable()
        out = git.execute(["rev-parse", "HEAD"], cwd="/tmp/repo.git")
        print(out.decode().strip())
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, timeout: Optional[float] = None):
        """
        Initialize GitExecutable.

        Args:
            path: Path to the git binary (default: discovered on PATH)
            timeout: Command timeout in seconds (default: None, wait forever)
        """
        if path:
            resolved = shutil.which(str(path))
            if resolved is None:
                raise GitExecutableNotFoundError(str(path))
            self.path = resolved
        else:
            self.path = find_git_executable()
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"GitExecutable({self.path!r})"

    def execute(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        input: bytes = b"",
    ) -> bytes:
        """
        Run git with the given arguments.

        Args:
            args: Argument tokens, e.g. ['cat-file', 'blob', '<hash>']
            cwd: Working directory
            input: Bytes fed to standard input

        Returns:
            Captured standard output

        Raises:
            GitCommandError: on nonzero exit
            GitTimeoutError: when the timeout expires
        """
        args = [str(arg) for arg in args]
        logger.debug(f"Running git {' '.join(args)} in {cwd}")

        try:
            result = subprocess.run(
                [self.path] + args,
                cwd=str(cwd) if cwd is not None else None,
                input=input,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: git {' '.join(args)}")
            raise GitTimeoutError(args, self.timeout)

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            logger.debug(f"Git command failed ({result.returncode}): {stderr.strip()}")
            raise GitCommandError(args, result.returncode, stderr=stderr, stdout=result.stdout)

        return result.stdout
