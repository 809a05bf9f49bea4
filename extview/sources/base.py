from abc import ABC, abstractmethod


class GalleryService(ABC):
    """Fetches raw marketplace assets (manifests, readmes) by locator."""

    @abstractmethod
    async def get_asset(self, locator: str) -> bytes:
        """
        Returns the asset body.
        Implementations raise FetchError when the asset cannot be retrieved.
        """
        pass


def as_text(data: bytes, encoding: str = "utf-8") -> str:
    if isinstance(data, str):
        return data
    return data.decode(encoding, errors="replace")
