"""
Remote repository access for remotegit.

Repository keeps a bare, shallow, partial clone of a remote in a transient
directory and drives git plumbing commands against it. Nothing is checked
out: objects are read and written directly in the object database, and new
commits reach the remote only through push_commit().

Example:
    with Repository("ssh://git@example.com/repo.git") as repo:
        branch = repo.get_branch("HEAD")
        tree = branch.get_tree()
        blob = repo.create_object("hello\\n")
        ...
        commit = repo.commit_tree(new_tree, "Update", branch.get_commit())
        repo.push_commit(commit, branch.name)
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from .domain.branch import REMOTE_REF_PREFIX, Branch
from .domain.objects import Commit, File, GitObject, Tree, TreeEntry, resolve_object_type
from .exceptions import (
    BranchNotFoundError,
    GitCommandError,
    HeadResolutionError,
    NoBranchesError,
    RepositoryClosedError,
)
from .infra.git_executable import GitExecutable
from .infra.temp_store import TransientStore

logger = logging.getLogger(__name__)

ObjectType = Union[str, Type[GitObject]]


class Repository:
    """
    A remote git repository mirrored into a transient bare clone.

    The clone is created on construction and removed by close(), by leaving
    a ``with`` block, or (best effort) when the object is garbage collected.
    """

    def __init__(
        self,
        url: str,
        temp_directory: Optional[Union[str, Path]] = None,
        git_executable: Optional[Union[str, Path, GitExecutable]] = None,
    ):
        """
        Clone the remote.

        Args:
            url: Remote git URL, e.g. ssh://user@example.com/repo.git
            temp_directory: Directory to store the shallow clone in
                (default: system temp directory)
            git_executable: Path to the git binary or a GitExecutable
                (default: git found on PATH)

        Raises:
            GitCommandError: if any setup step fails; the clone is removed
        """
        if not isinstance(git_executable, GitExecutable):
            git_executable = GitExecutable(git_executable)

        self.url = url
        self.executable = git_executable
        self._closed = False
        self._store = TransientStore(temp_directory, prefix="repo", suffix=".git")
        self.git_dir = self._store.path
        self._head_branch_name: Optional[str] = None
        self._branches: Dict[str, Branch] = {}
        self._branches_loaded = False

        try:
            self._initialize()
        except BaseException:
            self.close()
            raise

    @classmethod
    def from_config(cls, url: str, config: Optional[Dict[str, Any]] = None) -> "Repository":
        """
        Create a Repository using executable and storage settings from config.

        Args:
            url: Remote git URL
            config: Configuration dict (default: load_config())
        """
        if config is None:
            from .config import load_config
            config = load_config()

        git_config = config.get('git', {})
        executable = GitExecutable(
            git_config.get('executable') or None,
            timeout=git_config.get('timeout') or None,
        )
        temp_directory = config.get('storage', {}).get('temp_directory') or None
        return cls(url, temp_directory=temp_directory, git_executable=executable)

    def __repr__(self) -> str:
        return f"Repository({self.url!r}, git_dir={str(self.git_dir)!r})"

    def __enter__(self) -> "Repository":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        # Construction may have failed before _store was assigned
        if getattr(self, '_store', None) is not None:
            self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Remove the transient clone. Further operations will fail."""
        if self._closed:
            return
        self._closed = True
        logger.debug(f"Closing repository {self.url}")
        self._store.remove()

    # Branches

    def list_branches(self) -> List[Branch]:
        """
        List remote branches.

        The result is cached for the lifetime of this Repository; pushes do
        not refresh it.

        Raises:
            NoBranchesError: if the remote has no branches
        """
        if self._branches_loaded:
            return list(self._branches.values())

        try:
            output = self._run('show-ref')
        except GitCommandError as e:
            # show-ref exits 1 without output when there are no refs at all
            if e.returncode == 1 and not e.stdout.strip() and not e.stderr.strip():
                output = ''
            else:
                raise

        branches: Dict[str, Branch] = {}
        for line in output.strip().split('\n'):
            cols = line.split(' ', 1)
            if len(cols) != 2:
                continue

            commit_hash, ref = cols[0].strip(), cols[1].strip()
            if not ref.startswith(REMOTE_REF_PREFIX) or ref == REMOTE_REF_PREFIX + 'HEAD':
                continue
            if ref in branches:
                continue

            branches[ref] = Branch(self, ref[len(REMOTE_REF_PREFIX):], commit_hash)

        if not branches:
            raise NoBranchesError(self.url)

        logger.debug(f"Found {len(branches)} branches on {self.url}")
        self._branches = branches
        self._branches_loaded = True
        return list(self._branches.values())

    def get_branch(self, name: str) -> Branch:
        """
        Look up a remote branch by its short name.

        Args:
            name: Branch name, or "HEAD" for the remote default branch

        Raises:
            BranchNotFoundError: if the branch does not exist
        """
        self.list_branches()

        if name == 'HEAD':
            name = self.get_head_branch_name()

        ref = REMOTE_REF_PREFIX + name
        if ref not in self._branches:
            raise BranchNotFoundError(name)

        return self._branches[ref]

    def get_head_branch_name(self) -> str:
        """
        Name of the remote default branch, as advertised by the remote.

        Raises:
            HeadResolutionError: if origin/HEAD is not a remote branch ref
        """
        if self._head_branch_name is not None:
            return self._head_branch_name

        self._run('remote set-head origin -a')
        ref = self._run('symbolic-ref refs/remotes/origin/HEAD').strip()

        if not ref.startswith(REMOTE_REF_PREFIX) or ref == REMOTE_REF_PREFIX:
            raise HeadResolutionError(ref)

        self._head_branch_name = ref[len(REMOTE_REF_PREFIX):]
        return self._head_branch_name

    # Objects

    def get_commit(self, commit_hash: str) -> Commit:
        return Commit(self, commit_hash)

    def get_tree_from_commit(self, commit_hash: str) -> Tree:
        """Tree of the given commit, resolved with rev-parse."""
        return Tree(self, self._run('rev-parse', f'{commit_hash}^{{tree}}').strip())

    def read_object(self, object_hash: str, type: ObjectType = File) -> bytes:
        """
        Read raw object content.

        Args:
            object_hash: Object hash
            type: Commit, Tree or File (or 'commit', 'tree', 'blob')

        Returns:
            Content bytes exactly as stored

        Raises:
            InvalidObjectTypeError: for an unknown type, before running git
            GitCommandError: if the object is missing or of another type
        """
        object_type = resolve_object_type(type)
        return self._run_bytes('cat-file', object_type.get_type_name(), object_hash)

    def create_object(self, contents: Union[bytes, str], type: ObjectType = File) -> GitObject:
        """
        Write an object into the object database.

        Args:
            contents: Raw content; str is encoded as UTF-8
            type: Commit, Tree or File (or 'commit', 'tree', 'blob')

        Returns:
            Handle of the requested type for the new object
        """
        object_type = resolve_object_type(type)
        if isinstance(contents, str):
            contents = contents.encode('utf-8')

        object_hash = self._run_input(
            contents, 'hash-object -w --stdin -t', object_type.get_type_name()
        ).strip()
        return object_type(self, object_hash)

    def list_tree(self, tree: Tree) -> List[TreeEntry]:
        """Entries of a tree, in git order."""
        output = self._run('ls-tree -z', tree.hash)
        return [TreeEntry.from_line(line) for line in output.split('\0') if line]

    def make_tree(self, entries: Iterable[TreeEntry]) -> Tree:
        """
        Build a tree object from entries.

        Referenced objects need not be present locally, since a partial
        clone only has what it has fetched so far.
        """
        payload = ''.join(entry.to_line() + '\0' for entry in entries)
        object_hash = self._run_input(
            payload.encode('utf-8', errors='surrogateescape'), 'mktree -z --missing'
        ).strip()
        return Tree(self, object_hash)

    # Commits

    def commit_tree(self, tree: Tree, message: str, *parents: Commit) -> Commit:
        """
        Create a commit object for tree. No ref is updated.

        Args:
            tree: Tree the commit records
            message: Commit message
            *parents: Parent commits, first parent first
        """
        args = [tree.hash, '-m', message]
        for parent in parents:
            args.extend(['-p', parent.hash])

        return Commit(self, self._run('commit-tree', *args).strip())

    def push_commit(self, commit: Commit, branch_name: str, force: bool = False) -> "Repository":
        """
        Push commit to refs/heads/<branch_name> on the remote.

        By default the push is guarded by --force-with-lease: it is rejected
        if the remote branch moved since it was fetched. With force=True the
        remote branch is overwritten unconditionally.

        Args:
            commit: Commit to push
            branch_name: Remote branch name, or "HEAD" for the default branch
            force: Skip the lease check and force the update
        """
        if branch_name == 'HEAD':
            branch_name = self.get_head_branch_name()

        if force:
            lease = ['--no-force-with-lease', '--force']
        else:
            lease = ['--force-with-lease']

        logger.info(f"Pushing {commit.hash} to {self.url} {branch_name}")
        self._run('push origin --progress', *lease, f'{commit.hash}:refs/heads/{branch_name}')
        return self

    def set_author(self, name: str, email: str) -> "Repository":
        """Set the author and committer identity used by commit_tree()."""
        self._run('config user.name', name)
        self._run('config user.email', email)
        return self

    # Internals

    def _initialize(self) -> None:
        logger.info(f"Fetching {self.url} into {self.git_dir}")
        self.executable.execute(['init', '--bare', str(self.git_dir)])
        self._run('remote add origin', self.url)
        self._run('config remote.origin.promisor true')
        self._run('config remote.origin.partialclonefilter tree:0')
        self._run('fetch origin --progress --no-tags --depth 1')

    def _run(self, command: str, *args: str) -> str:
        return self._run_input(b'', command, *args)

    def _run_bytes(self, command: str, *args: str) -> bytes:
        return self._execute(b'', command, *args)

    def _run_input(self, input: bytes, command: str, *args: str) -> str:
        return self._execute(input, command, *args).decode('utf-8', errors='surrogateescape')

    def _execute(self, input: bytes, command: str, *args: str) -> bytes:
        # Subcommand words are split, argument values are passed as-is
        if self._closed:
            raise RepositoryClosedError(str(self.git_dir))
        return self.executable.execute(
            [*command.split(' '), *args], cwd=self.git_dir, input=input
        )
