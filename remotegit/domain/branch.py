"""
Branch domain object for remotegit.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict

from .objects import Commit, Tree

if TYPE_CHECKING:
    from ..repository import Repository

REMOTE_REF_PREFIX = "refs/remotes/origin/"


@dataclass(frozen=True)
class Branch:
    """
    A remote branch and the commit it pointed at when fetched.

    Branches are produced by Repository.list_branches(); the commit hash is a
    snapshot and is not updated by later pushes.
    """
    repository: "Repository" = field(compare=False, repr=False)
    name: str
    commit_hash: str

    @property
    def ref_name(self) -> str:
        return REMOTE_REF_PREFIX + self.name

    def get_name(self) -> str:
        return self.name

    def get_commit(self) -> Commit:
        return self.repository.get_commit(self.commit_hash)

    def get_tree(self) -> Tree:
        return self.repository.get_tree_from_commit(self.commit_hash)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'ref': self.ref_name,
            'commit': self.commit_hash,
        }
