from typing import Any, Dict

from extview.core.model import GalleryExtension, LocalExtension


def gallery_extension_telemetry_data(gallery: GalleryExtension) -> Dict[str, Any]:
    return {
        "id": f"{gallery.publisher}.{gallery.name}",
        "name": gallery.name,
        "galleryId": gallery.id,
        "publisherId": gallery.publisher_id,
        "publisherName": gallery.publisher,
        "publisherDisplayName": gallery.publisher_display_name,
        "dependencies": len(gallery.properties.dependencies),
    }


def local_extension_telemetry_data(local: LocalExtension) -> Dict[str, Any]:
    manifest = local.manifest
    metadata = local.metadata or {}
    dependencies = manifest.get("extensionDependencies") or []

    return {
        "id": f"{manifest.get('publisher')}.{manifest.get('name')}",
        "name": manifest.get("name"),
        "galleryId": metadata.get("id"),
        "publisherId": metadata.get("publisherId"),
        "publisherName": manifest.get("publisher"),
        "publisherDisplayName": metadata.get("publisherDisplayName"),
        "dependencies": len(dependencies),
    }
