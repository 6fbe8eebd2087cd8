"""Planning Center folder hierarchy -> flat locations.

Folders form a tree through ``relationships.parent``; service types hang off
a folder the same way. A location is anchored on a *root* folder (one with no
parent) that has at least one service type somewhere beneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ..config import settings
from ..errors import HierarchyError


def parent_folder_id(resource: dict[str, Any]) -> str | None:
    """Id of the resource's immediate parent when that parent is a Folder."""
    parent = ((resource.get("relationships") or {}).get("parent") or {}).get("data")
    if isinstance(parent, dict) and parent.get("type") == "Folder" and parent.get("id"):
        return str(parent["id"])
    return None


def _name(resource: dict[str, Any]) -> str:
    return (resource.get("attributes") or {}).get("name") or ""


@dataclass
class FolderTree:
    """Parent pointers and names of every folder, keyed by folder id."""

    parents: dict[str, str | None] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, folders: Iterable[dict[str, Any]]) -> FolderTree:
        tree = cls()
        for folder in folders:
            folder_id = folder.get("id")
            if not folder_id:
                continue
            folder_id = str(folder_id)
            tree.parents[folder_id] = parent_folder_id(folder)
            tree.names[folder_id] = _name(folder)
        return tree

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self.parents

    def find_root(self, folder_id: str, max_depth: int | None = None) -> str | None:
        """Walk parent pointers up to the folder that has none.

        Returns None for an unknown id or when the chain leads to a parent
        missing from the tree.

        Raises:
            HierarchyError: On a cycle or a chain deeper than ``max_depth``.
        """
        limit = max_depth if max_depth is not None else settings.folder_max_depth
        current = str(folder_id)
        if current not in self.parents:
            return None

        visited: set[str] = set()
        while True:
            if current in visited:
                raise HierarchyError(f"Folder hierarchy contains a cycle at folder {current}")
            if len(visited) >= limit:
                raise HierarchyError(
                    f"Folder hierarchy deeper than {limit} levels starting at folder {folder_id}"
                )
            visited.add(current)

            parent = self.parents[current]
            if parent is None:
                return current
            if parent not in self.parents:
                return None
            current = parent


def find_root_folder(
    folders: Iterable[dict[str, Any]] | FolderTree,
    folder_id: str,
    max_depth: int | None = None,
) -> str | None:
    """Topmost ancestor of ``folder_id`` (the folder itself when it is a root)."""
    tree = folders if isinstance(folders, FolderTree) else FolderTree.from_payload(folders)
    return tree.find_root(folder_id, max_depth=max_depth)


def root_folder_for_service_type(
    tree: FolderTree, service_type: dict[str, Any]
) -> str | None:
    """Root folder above a service type, or None when it is not in a folder."""
    parent = parent_folder_id(service_type)
    if parent is None:
        return None
    return tree.find_root(parent)


def eligible_root_folders(
    folders: Iterable[dict[str, Any]] | FolderTree,
    service_types: Iterable[dict[str, Any]],
) -> set[str]:
    """Root folders with at least one service type in their subtree."""
    tree = folders if isinstance(folders, FolderTree) else FolderTree.from_payload(folders)
    roots: set[str] = set()
    for service_type in service_types:
        root = root_folder_for_service_type(tree, service_type)
        if root is not None:
            roots.add(root)
    return roots


def service_types_in_folder(
    service_types: Iterable[dict[str, Any]], folder_id: str
) -> list[dict[str, Any]]:
    """Service types whose immediate parent is ``folder_id``."""
    return [st for st in service_types if parent_folder_id(st) == str(folder_id)]


def location_candidates(
    folders: Iterable[dict[str, Any]],
    service_types: Iterable[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Eligible root folders with the service types grouped beneath them.

    Each entry is ``{"folder_id", "name", "service_types": [{"id", "name",
    "folder_id"}]}``; folders and their service types are sorted by name.
    """
    tree = FolderTree.from_payload(folders)
    grouped: dict[str, list[dict[str, Any]]] = {}
    for service_type in service_types:
        root = root_folder_for_service_type(tree, service_type)
        if root is None:
            continue
        grouped.setdefault(root, []).append(
            {
                "id": str(service_type.get("id")),
                "name": _name(service_type),
                "folder_id": parent_folder_id(service_type),
            }
        )

    candidates = [
        {
            "folder_id": root,
            "name": tree.names.get(root, ""),
            "service_types": sorted(items, key=lambda st: st["name"].lower()),
        }
        for root, items in grouped.items()
    ]
    candidates.sort(key=lambda c: c["name"].lower())
    return candidates
