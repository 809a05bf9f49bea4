import logging
from typing import Optional

from packaging.version import InvalidVersion, Version


def parse_version(raw: Optional[str]) -> Optional[Version]:
    """Parses a marketplace version string, tolerating a leading 'v'."""
    if not raw:
        return None
    try:
        return Version(raw.strip().lstrip("vV"))
    except InvalidVersion:
        logging.debug(f"Unparseable version: {raw!r}")
        return None


def version_gt(left: Optional[str], right: Optional[str]) -> bool:
    """True when `left` is a strictly newer version than `right`.

    Versions that cannot be parsed never compare as newer.
    """
    left_ver = parse_version(left)
    right_ver = parse_version(right)
    if left_ver is None or right_ver is None:
        return False
    return left_ver > right_ver
