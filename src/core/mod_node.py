"""Installable mod tree."""
from typing import Iterator, List, Optional

from utils.symbols import LogSymbols


TREE_NAME_SEPARATOR = "."


class ModNode:
    """One installable unit of the mod catalog.
    
    A node with children is a grouping node; a leaf is directly installable.
    Children are owned by their parent (add_child reparents).
    """
    
    def __init__(self, name: str, description: Optional[str] = None, folder: Optional[str] = None,
                 version: Optional[str] = None, note: Optional[str] = None):
        self.name = name
        self.description = description
        self.folder = folder
        self.version = version
        self.note = note
        self.urls: List[str] = []
        self.exec_commands: List[str] = []
        self.children: List["ModNode"] = []
        self.parent: Optional["ModNode"] = None
    
    def __repr__(self):
        return f"ModNode({self.tree_name!r}, children={len(self.children)})"
    
    def add_child(self, child: "ModNode") -> "ModNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child
    
    @property
    def is_leaf(self) -> bool:
        return not self.children
    
    @property
    def tree_name(self) -> str:
        """Stable identity key: ancestor names joined from the root down."""
        names = []
        node = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return TREE_NAME_SEPARATOR.join(reversed(names))
    
    def walk(self) -> Iterator["ModNode"]:
        """Depth-first, pre-order traversal of this subtree."""
        yield self
        for child in self.children:
            yield from child.walk()
    
    def __iter__(self):
        return self.walk()


def walk_all(nodes: List[ModNode]) -> Iterator[ModNode]:
    """Depth-first traversal over a list of root nodes."""
    for node in nodes:
        yield from node.walk()


def find_duplicate_tree_names(nodes: List[ModNode]) -> List[str]:
    seen = set()
    duplicates = []
    for node in walk_all(nodes):
        key = node.tree_name
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


def render_tree(nodes: List[ModNode], installed_versions=None) -> str:
    """Text rendering of the catalog, one node per line."""
    installed_versions = installed_versions or {}
    lines = []
    
    def render(node, prefix, is_last):
        branch = LogSymbols.TREE_LAST if is_last else LogSymbols.TREE_BRANCH
        label = node.name
        if node.version:
            label += f" v{node.version}"
        installed = installed_versions.get(node.tree_name)
        if installed:
            label += f" ({LogSymbols.INSTALLED} {installed})"
        lines.append(f"{prefix}{branch} {label}")
        child_prefix = prefix + ("   " if is_last else "│  ")
        for i, child in enumerate(node.children):
            render(child, child_prefix, i == len(node.children) - 1)
    
    for i, node in enumerate(nodes):
        render(node, "", i == len(nodes) - 1)
    return "\n".join(lines)
