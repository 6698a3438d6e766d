"""
Git object handles for remotegit.

A GitObject is nothing more than a content hash plus the Repository that
can resolve it. Handles never cache content: every read goes back to the
object store, which may lazily fetch missing objects from the remote.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Type, Union

from ..exceptions import InvalidObjectTypeError, MalformedObjectError

if TYPE_CHECKING:
    from ..repository import Repository


@dataclass(frozen=True)
class GitObject:
    """Base handle; concrete variants only differ by TYPE_NAME."""
    TYPE_NAME: ClassVar[str] = ""

    repository: "Repository" = field(compare=False, repr=False)
    hash: str

    @classmethod
    def get_type_name(cls) -> str:
        return cls.TYPE_NAME

    def get_hash(self) -> str:
        return self.hash

    def read(self) -> bytes:
        """Raw object content as stored by git."""
        return self.repository.read_object(self.hash, type(self))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.TYPE_NAME,
            'hash': self.hash,
        }

    def __str__(self) -> str:
        return self.hash


@dataclass(frozen=True)
class Commit(GitObject):
    """A commit handle."""
    TYPE_NAME: ClassVar[str] = "commit"

    def _headers(self) -> List[List[str]]:
        text = self.read().decode("utf-8", errors="replace")
        header, _, _ = text.partition("\n\n")
        return [line.split(" ", 1) for line in header.splitlines() if " " in line]

    def get_tree(self) -> "Tree":
        for key, value in self._headers():
            if key == "tree":
                return Tree(self.repository, value.strip())
        raise MalformedObjectError(self.hash, "tree")

    def get_parents(self) -> List["Commit"]:
        """Parent commits in recorded order, first parent first."""
        return [
            Commit(self.repository, value.strip())
            for key, value in self._headers()
            if key == "parent"
        ]

    def get_message(self) -> str:
        text = self.read().decode("utf-8", errors="replace")
        _, _, message = text.partition("\n\n")
        return message


@dataclass(frozen=True)
class Tree(GitObject):
    """A tree handle."""
    TYPE_NAME: ClassVar[str] = "tree"

    def list_entries(self) -> List["TreeEntry"]:
        return self.repository.list_tree(self)


@dataclass(frozen=True)
class File(GitObject):
    """A blob handle."""
    TYPE_NAME: ClassVar[str] = "blob"

    def get_contents(self) -> bytes:
        return self.read()


Blob = File


@dataclass(frozen=True)
class TreeEntry:
    """One line of a tree listing."""
    mode: str  # 100644, 100755, 120000, 040000, 160000
    type: str  # blob, tree, commit
    hash: str
    name: str

    @classmethod
    def for_object(cls, obj: GitObject, name: str, mode: str = "") -> "TreeEntry":
        """Entry pointing at obj, with a mode matching its type unless given."""
        if not mode:
            mode = DEFAULT_MODES[obj.TYPE_NAME]
        return cls(mode=mode, type=obj.TYPE_NAME, hash=obj.hash, name=name)

    def to_line(self) -> str:
        """Render in ls-tree/mktree format (without terminator)."""
        return f"{self.mode} {self.type} {self.hash}\t{self.name}"

    @classmethod
    def from_line(cls, line: str) -> "TreeEntry":
        meta, _, name = line.partition("\t")
        mode, obj_type, obj_hash = meta.split(" ")
        return cls(mode=mode, type=obj_type, hash=obj_hash, name=name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode,
            'type': self.type,
            'hash': self.hash,
            'name': self.name,
        }


DEFAULT_MODES = {
    'blob': '100644',
    'tree': '040000',
    'commit': '160000',
}

OBJECT_TYPES: Dict[str, Type[GitObject]] = {
    Commit.TYPE_NAME: Commit,
    Tree.TYPE_NAME: Tree,
    File.TYPE_NAME: File,
}


def resolve_object_type(value: Union[str, Type[GitObject]]) -> Type[GitObject]:
    """
    Validate an object type given as a class or a discriminator string.

    Raises:
        InvalidObjectTypeError: for anything but Commit/Tree/File or
            'commit'/'tree'/'blob'
    """
    if isinstance(value, str):
        if value in OBJECT_TYPES:
            return OBJECT_TYPES[value]
    elif isinstance(value, type) and value in OBJECT_TYPES.values():
        return value
    raise InvalidObjectTypeError(value)
