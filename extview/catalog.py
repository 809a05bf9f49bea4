import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from extview.core.dependencies import ExtensionDependencies
from extview.core.extension import Extension, FileReader
from extview.core.model import ExtensionState, GalleryExtension, LocalExtension
from extview.core.versions import version_gt
from extview.sources.base import GalleryService
from extview.sources.files import read_file


def extension_key(publisher: str, name: str) -> str:
    return f"{publisher}.{name}"


class ExtensionCatalog:
    """
    Merges local and gallery records into Extension views keyed by
    "publisher.name", and serves as their state provider.
    """

    def __init__(
        self,
        gallery_service: Optional[GalleryService] = None,
        *,
        read_file: FileReader = read_file,
        version_gt: Callable[[str, str], bool] = version_gt,
    ):
        self._gallery_service = gallery_service
        self._read_file = read_file
        self._version_gt = version_gt
        self._extensions: Dict[str, Extension] = {}
        self._states: Dict[str, ExtensionState] = {}

    # --- MAPPING ---

    def __getitem__(self, key: str) -> Extension:
        return self._extensions[key]

    def __contains__(self, key: object) -> bool:
        return key in self._extensions

    def __iter__(self) -> Iterator[str]:
        return iter(self._extensions)

    def __len__(self) -> int:
        return len(self._extensions)

    def get(self, key: str) -> Optional[Extension]:
        return self._extensions.get(key)

    @property
    def local(self) -> List[Extension]:
        return [ext for ext in self._extensions.values() if ext.local is not None]

    @property
    def outdated(self) -> List[Extension]:
        return [ext for ext in self._extensions.values() if ext.outdated]

    # --- MERGING ---

    def add_local(self, records: Iterable[LocalExtension]) -> None:
        count = 0
        for record in records:
            key = extension_key(record.manifest.get("publisher"), record.manifest.get("name"))
            current = self._extensions.get(key)
            gallery = current.gallery if current else None
            self._extensions[key] = self._make(record, gallery)
            count += 1
        logging.debug(f"Merged {count} local extensions. Catalog size: {len(self._extensions)}")

    def add_gallery(self, records: Iterable[GalleryExtension]) -> None:
        count = 0
        for record in records:
            key = extension_key(record.publisher, record.name)
            current = self._extensions.get(key)
            local = current.local if current else None
            self._extensions[key] = self._make(local, record)
            count += 1
        logging.debug(f"Merged {count} gallery extensions. Catalog size: {len(self._extensions)}")

    def _make(self, local: Optional[LocalExtension], gallery: Optional[GalleryExtension]) -> Extension:
        return Extension(
            self._gallery_service,
            self.state_of,
            local,
            gallery,
            read_file=self._read_file,
            version_gt=self._version_gt,
        )

    # --- STATE ---

    def state_of(self, extension: Extension) -> ExtensionState:
        override = self._states.get(extension.key)
        if override is not None:
            return override
        return ExtensionState.INSTALLED if extension.local else ExtensionState.UNINSTALLED

    def set_state(self, key: str, state: Optional[ExtensionState]) -> None:
        """Pins the state of `key`; None returns it to the record-derived state."""
        if state is None:
            self._states.pop(key, None)
        else:
            self._states[key] = state

    # --- DEPENDENCIES ---

    def load_dependencies(self, extension: Extension) -> ExtensionDependencies:
        return ExtensionDependencies(extension, self)
