from .base import GalleryService, as_text
from .files import read_file
from .gallery import HttpGalleryService

__all__ = [
    "GalleryService",
    "HttpGalleryService",
    "as_text",
    "read_file",
]
