import re
from typing import Optional, Tuple

_VERSION_RE = re.compile(r"(\d+(?:\.\d+)*)")


def parse_version(text: str) -> Optional[Tuple[int, ...]]:
    """
    Extracts the numeric core of a version string as a tuple of integers.

    Tolerates prefixes and suffixes tools commonly print, e.g.
    ``Docker version 24.0.7, build afdd53b`` -> (24, 0, 7) and
    ``v2.24.6-desktop.1`` -> (2, 24, 6). Returns None when no digits are found.
    """
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def version_ge(version: str, minimum: str) -> bool:
    """
    Returns True if ``version`` >= ``minimum``, comparing components numerically.

    Missing trailing components count as zero, so "2.0" equals "2.0.0".
    """
    left = parse_version(version)
    right = parse_version(minimum)
    if left is None or right is None:
        raise ValueError(f"Cannot compare versions {version!r} and {minimum!r}")

    width = max(len(left), len(right))
    left = left + (0,) * (width - len(left))
    right = right + (0,) * (width - len(right))
    return left >= right
