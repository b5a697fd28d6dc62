"""Flat node records produced by the tree scanner."""

from dataclasses import asdict, dataclass
from enum import Enum


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Node:
    """One discovered filesystem entry. No parent/child links."""

    path: str
    name: str  # final path segment of path
    kind: NodeKind
    size: int = 0  # always 0 for directories
    modified_at: float = 0.0  # POSIX mtime; 0.0 when unknown
    depth: int = 0
    risk_score: float = 1.0

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def make_node(
    path: str,
    name: str,
    kind: NodeKind,
    size: int,
    modified_at: float,
    depth: int,
    risk_score: float = 1.0,
) -> Node:
    """Build a Node. The caller is responsible for a kind that matches the filesystem."""
    return Node(
        path=path,
        name=name,
        kind=kind,
        size=size,
        modified_at=modified_at,
        depth=depth,
        risk_score=risk_score,
    )
