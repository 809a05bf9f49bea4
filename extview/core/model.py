from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LocalExtensionType(Enum):
    SYSTEM = 0
    USER = 1


class ExtensionState(Enum):
    INSTALLING = 0
    INSTALLED = 1
    NEEDS_RESTART = 2
    UNINSTALLED = 3


@dataclass(frozen=True)
class LocalExtension:
    """An extension installed on disk, as described by its package manifest."""

    type: LocalExtensionType
    manifest: Dict[str, Any]
    path: str
    metadata: Optional[Dict[str, Any]] = None
    readme_url: Optional[str] = None
    changelog_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocalExtension":
        raw_type = data.get("type", LocalExtensionType.USER.value)
        ext_type = raw_type if isinstance(raw_type, LocalExtensionType) else LocalExtensionType(raw_type)

        return cls(
            type=ext_type,
            manifest=dict(data.get("manifest") or {}),
            path=data.get("path", ""),
            metadata=data.get("metadata"),
            readme_url=data.get("readmeUrl"),
            changelog_url=data.get("changelogUrl"),
        )


@dataclass(frozen=True)
class GalleryAssets:
    manifest: Optional[str] = None
    readme: Optional[str] = None
    changelog: Optional[str] = None
    download: Optional[str] = None
    icon: Optional[str] = None
    icon_fallback: Optional[str] = None
    license: Optional[str] = None


@dataclass(frozen=True)
class GalleryProperties:
    # "publisher.name" ids, in declared order
    dependencies: List[str] = field(default_factory=list)
    engine: Optional[str] = None


@dataclass(frozen=True)
class GalleryExtension:
    """An extension as published in the marketplace."""

    name: str
    publisher: str
    version: str
    id: Optional[str] = None
    date: Optional[str] = None
    display_name: Optional[str] = None
    publisher_id: Optional[str] = None
    publisher_display_name: Optional[str] = None
    description: Optional[str] = None
    install_count: Optional[int] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    assets: GalleryAssets = field(default_factory=GalleryAssets)
    properties: GalleryProperties = field(default_factory=GalleryProperties)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GalleryExtension":
        """Builds a record from the camelCase payload served by a gallery."""
        assets = data.get("assets") or {}
        properties = data.get("properties") or {}

        return cls(
            name=data["name"],
            publisher=data["publisher"],
            version=data.get("version", ""),
            id=data.get("id"),
            date=data.get("date"),
            display_name=data.get("displayName"),
            publisher_id=data.get("publisherId"),
            publisher_display_name=data.get("publisherDisplayName"),
            description=data.get("description"),
            install_count=data.get("installCount"),
            rating=data.get("rating"),
            rating_count=data.get("ratingCount"),
            assets=GalleryAssets(
                manifest=assets.get("manifest"),
                readme=assets.get("readme"),
                changelog=assets.get("changelog"),
                download=assets.get("download"),
                icon=assets.get("icon"),
                icon_fallback=assets.get("iconFallback"),
                license=assets.get("license"),
            ),
            properties=GalleryProperties(
                dependencies=list(properties.get("dependencies") or []),
                engine=properties.get("engine"),
            ),
        )
