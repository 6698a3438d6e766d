"""
Transient on-disk storage for the shadow repository.

A TransientStore reserves a unique path under a temp directory and owns
whatever ends up there until it is removed.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree at path if it exists."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


class TransientStore:
    """
    A uniquely named, initially empty path that is removed on teardown.

    Example:
        with TransientStore(prefix="repo", suffix=".git") as store:
            subprocess.run(["git", "init", "--bare", str(store.path)])
    """

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        prefix: str = "repo",
        suffix: str = ".git",
    ):
        """
        Reserve a unique path.

        Args:
            directory: Parent directory (default: system temp directory)
            prefix: File name prefix
            suffix: File name suffix
        """
        parent = Path(directory).expanduser() if directory else Path(tempfile.gettempdir())

        # mkstemp guarantees a name nobody else holds; the placeholder file is
        # dropped right away so git can create its own directory there.
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=parent)
        os.close(fd)
        self.path = Path(name)
        remove_path(self.path)
        self.removed = False

    def __repr__(self) -> str:
        return f"TransientStore({str(self.path)!r})"

    def __enter__(self) -> "TransientStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.remove()

    def exists(self) -> bool:
        return self.path.exists() or self.path.is_symlink()

    def remove(self) -> None:
        """Remove the store from disk. Safe to call more than once."""
        if self.removed:
            return
        self.removed = True
        try:
            remove_path(self.path)
            logger.debug(f"Removed transient store {self.path}")
        except OSError as e:
            logger.warning(f"Failed to remove transient store {self.path}: {e}")
