import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from extview.core.errors import ManifestParseError, NotAvailableError
from extview.core.model import ExtensionState, GalleryExtension, LocalExtension, LocalExtensionType
from extview.core.telemetry import gallery_extension_telemetry_data, local_extension_telemetry_data
from extview.core.versions import version_gt
from extview.sources.base import GalleryService, as_text
from extview.sources.files import read_file

DEFAULT_ICON_URL = (Path(__file__).resolve().parent.parent / "media" / "default_icon.svg").as_uri()

StateProvider = Callable[["Extension"], ExtensionState]
FileReader = Callable[[str, str], Awaitable[str]]


def _file_path(url: str) -> Optional[str]:
    """Local filesystem path for a file: URL, None for any other scheme.

    A host other than localhost is kept as a UNC prefix (//host/share/...).
    """
    parsed = urlparse(url)
    if parsed.scheme != "file":
        return None
    if parsed.netloc and parsed.netloc.lower() != "localhost":
        return url2pathname(f"//{parsed.netloc}{parsed.path}")
    return url2pathname(parsed.path)


class Extension:
    """
    One read-only view over a local record, a gallery record, or both.

    Every property is derived on access from the two records, so the view
    never needs invalidation. Lifecycle state is owned by whoever supplies
    `state_provider`.
    """

    def __init__(
        self,
        gallery_service: Optional[GalleryService],
        state_provider: Optional[StateProvider],
        local: Optional[LocalExtension] = None,
        gallery: Optional[GalleryExtension] = None,
        *,
        read_file: FileReader = read_file,
        version_gt: Callable[[str, str], bool] = version_gt,
    ):
        if local is None and gallery is None:
            raise ValueError("Extension needs a local record, a gallery record, or both")

        self._gallery_service = gallery_service
        self._state_provider = state_provider
        self._read_file = read_file
        self._version_gt = version_gt
        self.local = local
        self.gallery = gallery

    def __repr__(self) -> str:
        return f"Extension({self.key!r}, version={self.version!r})"

    # --- IDENTITY ---

    @property
    def key(self) -> str:
        return f"{self.publisher}.{self.name}"

    @property
    def type(self) -> Optional[LocalExtensionType]:
        return self.local.type if self.local else None

    @property
    def name(self) -> str:
        return self.local.manifest.get("name") if self.local else self.gallery.name

    @property
    def display_name(self) -> str:
        if self.local:
            return self.local.manifest.get("displayName") or self.local.manifest.get("name")

        return self.gallery.display_name or self.gallery.name

    @property
    def publisher(self) -> str:
        return self.local.manifest.get("publisher") if self.local else self.gallery.publisher

    @property
    def publisher_display_name(self) -> str:
        if self.local:
            metadata = self.local.metadata or {}
            if metadata.get("publisherDisplayName"):
                return metadata["publisherDisplayName"]

            return self.local.manifest.get("publisher")

        return self.gallery.publisher_display_name or self.gallery.publisher

    @property
    def version(self) -> str:
        return self.local.manifest.get("version") if self.local else self.gallery.version

    @property
    def latest_version(self) -> str:
        return self.gallery.version if self.gallery else self.local.manifest.get("version")

    @property
    def description(self) -> Optional[str]:
        return self.local.manifest.get("description") if self.local else self.gallery.description

    # --- ICONS ---

    @property
    def icon_url(self) -> str:
        return self._local_icon_url or self._gallery_asset("icon") or DEFAULT_ICON_URL

    @property
    def icon_url_fallback(self) -> str:
        return self._local_icon_url or self._gallery_asset("icon_fallback") or DEFAULT_ICON_URL

    @property
    def _local_icon_url(self) -> Optional[str]:
        icon = self.local.manifest.get("icon") if self.local else None
        if not icon:
            return None
        return Path(self.local.path, icon).absolute().as_uri()

    def _gallery_asset(self, kind: str) -> Optional[str]:
        if self.gallery is None or self.gallery.assets is None:
            return None
        return getattr(self.gallery.assets, kind)

    # --- GALLERY STATS ---

    @property
    def license_url(self) -> Optional[str]:
        return self._gallery_asset("license")

    @property
    def install_count(self) -> Optional[int]:
        return self.gallery.install_count if self.gallery else None

    @property
    def rating(self) -> Optional[float]:
        return self.gallery.rating if self.gallery else None

    @property
    def rating_count(self) -> Optional[int]:
        return self.gallery.rating_count if self.gallery else None

    # --- DERIVED ---

    @property
    def state(self) -> ExtensionState:
        return self._state_provider(self)

    @property
    def outdated(self) -> bool:
        return self.type == LocalExtensionType.USER and self._version_gt(self.latest_version, self.version)

    @property
    def has_dependencies(self) -> bool:
        if self.gallery is None or self.gallery.properties is None:
            return False
        return len(self.gallery.properties.dependencies) > 0

    @property
    def telemetry_data(self) -> Dict[str, Any]:
        if self.gallery:
            return gallery_extension_telemetry_data(self.gallery)
        return local_extension_telemetry_data(self.local)

    # --- CONTENT ---

    @property
    def _readme_url(self) -> Optional[str]:
        if self.local and self.local.readme_url:
            return self.local.readme_url
        return self._gallery_asset("readme")

    @property
    def _changelog_url(self) -> Optional[str]:
        if self.local and self.local.changelog_url:
            return self.local.changelog_url
        return self._gallery_asset("changelog")

    @property
    def has_changelog(self) -> bool:
        return bool(self._changelog_url)

    async def get_manifest(self) -> Dict[str, Any]:
        if self.local:
            return self.local.manifest

        locator = self._gallery_asset("manifest")
        if not locator:
            raise NotAvailableError()

        raw = as_text(await self._fetch(locator))
        try:
            manifest = json.loads(raw)
        except ValueError as e:
            logging.warning(f"Malformed manifest for {self.key}: {e}")
            raise ManifestParseError(f"manifest of {self.key} is not valid JSON") from e

        if not isinstance(manifest, dict):
            raise ManifestParseError(f"manifest of {self.key} is not a JSON object")

        return manifest

    async def get_readme(self) -> str:
        readme_url = self._readme_url
        if not readme_url:
            raise NotAvailableError()

        path = _file_path(readme_url)
        if path is not None:
            return await self._read_local(path)

        return as_text(await self._fetch(readme_url))

    async def get_changelog(self) -> str:
        changelog_url = self._changelog_url
        if not changelog_url:
            raise NotAvailableError()

        path = _file_path(changelog_url)
        if path is not None:
            return await self._read_local(path)

        raise NotAvailableError()

    async def _fetch(self, locator: str) -> bytes:
        if self._gallery_service is None:
            logging.debug(f"No gallery service to fetch {locator} for {self.key}")
            raise NotAvailableError()
        return await self._gallery_service.get_asset(locator)

    async def _read_local(self, path: str) -> str:
        try:
            return await self._read_file(path, "utf-8")
        except OSError as e:
            logging.warning(f"Cannot read {path}: {e}")
            raise NotAvailableError(f"cannot read {path}") from e
