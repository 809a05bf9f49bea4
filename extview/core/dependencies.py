import logging
from typing import Iterator, List, Mapping, Optional

from extview.core.errors import ExtensionLookupError
from extview.core.extension import Extension

DEFAULT_MAX_DEPTH = 8


class ExtensionDependencies:
    """
    A node in the dependency tree of an extension.

    Children are resolved against the catalog on every access to
    `dependencies`, one level at a time. Nothing is cached and cycles are
    not cut here; use `walk` or check `is_cycle` before descending.
    """

    def __init__(
        self,
        extension: Extension,
        catalog: Mapping[str, Extension],
        dependent: Optional["ExtensionDependencies"] = None,
    ):
        self._extension = extension
        self._catalog = catalog
        self._dependent = dependent

    def __repr__(self) -> str:
        return f"ExtensionDependencies({self._extension.key!r}, depth={self.depth})"

    @property
    def extension(self) -> Extension:
        return self._extension

    @property
    def dependent(self) -> Optional["ExtensionDependencies"]:
        return self._dependent

    @property
    def has_dependencies(self) -> bool:
        return self._extension.has_dependencies

    @property
    def dependency_ids(self) -> List[str]:
        """Declared "publisher.name" ids, in declared order. A copy of the record's list."""
        gallery = self._extension.gallery
        if gallery is None or gallery.properties is None:
            return []
        return list(gallery.properties.dependencies)

    @property
    def dependencies(self) -> List["ExtensionDependencies"]:
        return [self.child(dependency_id) for dependency_id in self.dependency_ids]

    def child(self, dependency_id: str) -> "ExtensionDependencies":
        """Node for one dependency id; raises ExtensionLookupError when the catalog lacks it."""
        return ExtensionDependencies(self._resolve(dependency_id), self._catalog, self)

    @property
    def depth(self) -> int:
        depth = 0
        node = self._dependent
        while node is not None:
            depth += 1
            node = node.dependent
        return depth

    @property
    def is_cycle(self) -> bool:
        """True when this node's extension already appears among its ancestors."""
        key = self._extension.key
        node = self._dependent
        while node is not None:
            if node.extension.key == key:
                return True
            node = node.dependent
        return False

    def walk(self, max_depth: int = DEFAULT_MAX_DEPTH) -> Iterator["ExtensionDependencies"]:
        """
        Pre-order traversal starting at this node.
        Stops descending at `max_depth` levels below this node and below cycle nodes.
        """
        yield self
        if max_depth <= 0 or self.is_cycle:
            return
        for child in self.dependencies:
            yield from child.walk(max_depth - 1)

    def _resolve(self, dependency_id: str) -> Extension:
        try:
            return self._catalog[dependency_id]
        except KeyError:
            logging.warning(f"Dependency {dependency_id} of {self._extension.key} not found in catalog")
            raise ExtensionLookupError(dependency_id, self._extension.key) from None
