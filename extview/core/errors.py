class ExtensionError(Exception):
    """Base class for failures surfaced by extension views and trees."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class NotAvailableError(ExtensionError):
    """Raised when no asset resolves or the content kind has no fetch path."""

    def __init__(self, reason: str = "not available"):
        super().__init__(reason)


class FetchError(ExtensionError):
    """Raised when a remote gallery asset cannot be retrieved."""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        super().__init__(f"{reason} ({locator})")


class ManifestParseError(ExtensionError):
    """Raised when a fetched manifest is not a well-formed JSON object."""


class ExtensionLookupError(ExtensionError, KeyError):
    """Raised when a dependency id is not present in the catalog."""

    def __init__(self, dependency_id: str, dependent: str):
        self.dependency_id = dependency_id
        self.dependent = dependent
        super().__init__(f"Dependency '{dependency_id}' of '{dependent}' is not in the catalog")

    def __str__(self) -> str:
        return self.reason
