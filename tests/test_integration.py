"""
Integration tests against real git repositories.

Each test gets a bare "origin" repository served over file:// with a main
branch (the default) and a feature branch.
"""

import os
import shutil
import subprocess
import pytest
from pathlib import Path

from remotegit import (
    Commit,
    File,
    GitCommandError,
    InvalidObjectTypeError,
    Repository,
    TreeEntry,
)


pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed"),
]

IDENTITY = [
    "-c", "user.name=Test User",
    "-c", "user.email=test@example.com",
    "-c", "commit.gpgsign=false",
]


def git(*args, cwd=None):
    result = subprocess.run(
        ["git", *IDENTITY, *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def origin_ref(origin: Path, branch: str) -> str:
    return git("--git-dir", str(origin), "rev-parse", f"refs/heads/{branch}")


@pytest.fixture
def origin(tmp_path):
    """Bare repository with main (default) and feature branches."""
    origin = tmp_path / "origin.git"
    git("init", "--bare", str(origin))
    git("--git-dir", str(origin), "symbolic-ref", "HEAD", "refs/heads/main")

    work = tmp_path / "work"
    git("init", str(work))
    (work / "README.md").write_text("# Project\n")
    (work / "src").mkdir()
    (work / "src" / "app.py").write_text("print('hello')\n")
    git("add", ".", cwd=work)
    git("commit", "-m", "Initial commit", cwd=work)
    git("push", str(origin), "HEAD:refs/heads/main", cwd=work)

    (work / "FEATURE.md").write_text("wip\n")
    git("add", ".", cwd=work)
    git("commit", "-m", "Start feature", cwd=work)
    git("push", str(origin), "HEAD:refs/heads/feature", cwd=work)

    return origin


@pytest.fixture
def url(origin):
    return origin.as_uri()


@pytest.fixture
def store_dir(tmp_path):
    path = tmp_path / "stores"
    path.mkdir()
    return path


@pytest.fixture
def repo(url, store_dir):
    with Repository(url, temp_directory=store_dir) as repo:
        repo.set_author("Remote Writer", "writer@example.com")
        yield repo


def commit_file(repo: Repository, branch_name: str, name: str, content: bytes, message: str) -> Commit:
    """Commit a top-level file on top of a branch without pushing."""
    branch = repo.get_branch(branch_name)
    blob = repo.create_object(content, File)
    entries = [e for e in branch.get_tree().list_entries() if e.name != name]
    entries.append(TreeEntry.for_object(blob, name))
    tree = repo.make_tree(entries)
    return repo.commit_tree(tree, message, branch.get_commit())


class TestClone:
    """Tests for the shadow clone."""

    def test_store_lives_in_temp_directory(self, url, store_dir):
        with Repository(url, temp_directory=store_dir) as repo:
            assert repo.git_dir.parent == store_dir
            assert (repo.git_dir / "HEAD").exists()
        assert not repo.git_dir.exists()
        assert list(store_dir.iterdir()) == []

    def test_clone_is_bare(self, repo):
        assert git("--git-dir", str(repo.git_dir), "rev-parse", "--is-bare-repository") == "true"
        assert not (repo.git_dir / ".git").exists()

    def test_partial_clone_config(self, repo):
        config = git("--git-dir", str(repo.git_dir), "config", "--list")
        assert "remote.origin.promisor=true" in config
        assert "remote.origin.partialclonefilter=tree:0" in config

    def test_unreachable_remote(self, tmp_path, store_dir):
        missing = (tmp_path / "missing.git").as_uri()
        with pytest.raises(GitCommandError):
            Repository(missing, temp_directory=store_dir)
        assert list(store_dir.iterdir()) == []


class TestBranches:
    """Tests for branch listing against a real remote."""

    def test_list_branches(self, repo, origin):
        branches = {b.name: b for b in repo.list_branches()}

        assert set(branches) == {"main", "feature"}
        assert branches["main"].commit_hash == origin_ref(origin, "main")
        assert branches["feature"].commit_hash == origin_ref(origin, "feature")
        assert all(b.ref_name.startswith("refs/remotes/origin/") for b in branches.values())

    def test_list_branches_twice(self, repo):
        assert repo.list_branches() == repo.list_branches()

    def test_head_is_default_branch(self, repo):
        assert repo.get_head_branch_name() == "main"
        assert repo.get_branch("HEAD") == repo.get_branch("main")


class TestObjects:
    """Tests for reading and writing objects."""

    def test_blob_round_trip(self, repo):
        content = b"\x00\x01binary\xff\xfe\n\r\nno trailing newline"
        blob = repo.create_object(content, File)

        assert isinstance(blob, File)
        assert repo.read_object(blob.hash, File) == content
        assert blob.get_contents() == content

    def test_empty_blob(self, repo):
        blob = repo.create_object(b"")
        assert blob.hash == "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
        assert blob.hash == git("hash-object", "-t", "blob", os.devnull)
        assert repo.read_object(blob.hash) == b""

    def test_read_existing_file(self, repo):
        tree = repo.get_branch("main").get_tree()
        readme = next(e for e in tree.list_entries() if e.name == "README.md")
        assert repo.read_object(readme.hash, "blob") == b"# Project\n"

    def test_tree_from_commit(self, repo, origin):
        branch = repo.get_branch("main")
        tree = repo.get_tree_from_commit(branch.commit_hash)

        expected = git("--git-dir", str(origin), "rev-parse", "refs/heads/main^{tree}")
        assert tree.hash == expected
        assert branch.get_commit().get_tree() == tree

    def test_list_tree(self, repo):
        entries = {e.name: e for e in repo.get_branch("main").get_tree().list_entries()}

        assert set(entries) == {"README.md", "src"}
        assert entries["src"].type == "tree"
        assert entries["README.md"].mode == "100644"

    def test_make_tree_reproduces_tree(self, repo):
        tree = repo.get_branch("main").get_tree()
        assert repo.make_tree(tree.list_entries()) == tree

    def test_invalid_type_vs_missing_object(self, repo):
        with pytest.raises(InvalidObjectTypeError):
            repo.read_object("deadbeef" * 5, "tag")

        with pytest.raises(GitCommandError) as exc_info:
            repo.read_object("deadbeef" * 5, File)
        assert not isinstance(exc_info.value, InvalidObjectTypeError)

    def test_wrong_type_fails(self, repo):
        branch = repo.get_branch("main")
        with pytest.raises(GitCommandError):
            repo.read_object(branch.commit_hash, File)


class TestCommits:
    """Tests for commit construction."""

    def test_commit_tree_parents_and_tree(self, repo):
        main = repo.get_branch("main").get_commit()
        feature = repo.get_branch("feature").get_commit()
        tree = repo.get_branch("feature").get_tree()

        merge = repo.commit_tree(tree, "Merge feature", main, feature)

        assert merge.get_parents() == [main, feature]
        assert merge.get_tree() == tree
        assert merge.get_message() == "Merge feature\n"

    def test_commit_uses_author(self, repo):
        tree = repo.get_branch("main").get_tree()
        commit = repo.commit_tree(tree, "Root")

        content = repo.read_object(commit.hash, Commit).decode()
        assert "author Remote Writer <writer@example.com>" in content
        assert commit.get_parents() == []

    def test_commit_does_not_move_branches(self, repo, origin):
        before = origin_ref(origin, "main")
        commit_file(repo, "main", "NEW.md", b"new\n", "Add NEW.md")
        assert origin_ref(origin, "main") == before


class TestPush:
    """Tests for pushing commits back to the remote."""

    def test_push_advances_branch(self, repo, url, store_dir, origin):
        commit = commit_file(repo, "main", "NOTES.md", b"notes\n", "Add notes")
        repo.push_commit(commit, "main")

        assert origin_ref(origin, "main") == commit.hash
        with Repository(url, temp_directory=store_dir) as fresh:
            assert fresh.get_branch("main").commit_hash == commit.hash

    def test_push_to_head(self, repo, origin):
        commit = commit_file(repo, "main", "NOTES.md", b"notes\n", "Add notes")
        repo.push_commit(commit, "HEAD")
        assert origin_ref(origin, "main") == commit.hash

    def test_push_new_branch(self, repo, origin):
        commit = commit_file(repo, "main", "NOTES.md", b"notes\n", "Add notes")
        repo.push_commit(commit, "notes")
        assert origin_ref(origin, "notes") == commit.hash

    def test_lease_rejects_concurrent_update(self, url, store_dir, origin):
        with Repository(url, temp_directory=store_dir) as first, \
                Repository(url, temp_directory=store_dir) as second:
            first.set_author("First", "first@example.com")
            second.set_author("Second", "second@example.com")

            theirs = commit_file(second, "main", "THEIRS.md", b"theirs\n", "Their change")
            ours = commit_file(first, "main", "OURS.md", b"ours\n", "Our change")

            second.push_commit(theirs, "main")

            with pytest.raises(GitCommandError):
                first.push_commit(ours, "main")
            assert origin_ref(origin, "main") == theirs.hash

            first.push_commit(ours, "main", force=True)
            assert origin_ref(origin, "main") == ours.hash
