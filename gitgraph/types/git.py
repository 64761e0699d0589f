"""Git object-graph data models."""

from dataclasses import dataclass, field

from gitgraph.exceptions import InvalidArgumentError

ENCODING_UTF8 = "utf-8"
ENCODING_BASE64 = "base64"
CONTENT_ENCODINGS = (ENCODING_UTF8, ENCODING_BASE64)

MODE_FILE = "100644"
MODE_EXECUTABLE = "100755"
MODE_SUBMODULE = "160000"
MODE_TREE = "040000"
MODE_SYMLINK = "120000"


@dataclass(frozen=True)
class RepositoryIdentifier:
    """A repository on the provider, addressed by owner and name."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class PullRequestIdentifier:
    """A single pull request resource."""

    owner: str
    repo: str
    number: int

    @property
    def repository(self) -> RepositoryIdentifier:
        return RepositoryIdentifier(owner=self.owner, repo=self.repo)


@dataclass
class GitFile:
    """
    A file to write in a commit, or a file read back from one.

    ``content_encoding`` is exactly ``"utf-8"`` or ``"base64"``; binary
    content must be sent as ``"base64"``.
    """

    file_path: str
    content: str
    content_encoding: str = ENCODING_UTF8
    mode: str = MODE_FILE

    def __post_init__(self) -> None:
        if self.content_encoding not in CONTENT_ENCODINGS:
            raise InvalidArgumentError(
                f"Unsupported content encoding '{self.content_encoding}' for "
                f"'{self.file_path}'. Must be 'utf-8' or 'base64'"
            )


@dataclass
class TreeNode:
    """An entry in a tree: a reference to a blob or a subtree."""

    path: str
    sha: str
    type: str  # "blob", "tree" or "commit" (submodule)
    mode: str
    size: int | None = None


@dataclass
class Tree:
    """A tree object as returned by the provider."""

    sha: str
    entries: list[TreeNode] = field(default_factory=list)
    truncated: bool = False


@dataclass
class Blob:
    """A blob object with its transmitted content."""

    sha: str
    content: str
    encoding: str
    size: int | None = None


@dataclass
class CommitRecord:
    """An immutable commit."""

    sha: str
    tree_sha: str
    parent_shas: list[str]
    message: str | None = None


@dataclass
class BranchRef:
    """A branch ref and the commit it points at."""

    name: str
    target_sha: str
    force: bool = False

    @property
    def ref(self) -> str:
        return f"refs/heads/{self.name}"
