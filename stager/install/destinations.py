"""
Destination resolution.

Maps a (base, subfolder) pair onto the concrete directory a build variant
installs into. On multi-variant platforms Debug and RelWithDebInfo outputs
get sibling trees (`<base>_debug`, `<base>_withDebInfo`) so that every
configuration can be installed side by side.
"""

import posixpath
from dataclasses import dataclass
from typing import Iterable, List, Union

from .platform import BuildVariant, PlatformProfile


def normalize_path(*parts: str) -> str:
    """Join path parts with forward slashes and collapse redundant separators."""
    joined = "/".join(str(p).replace("\\", "/") for p in parts if p)
    if not joined:
        return ""
    return posixpath.normpath(joined)


def resolve(base: str, subfolder: str, variant: BuildVariant, profile: PlatformProfile) -> str:
    """
    Resolve the install directory for one build variant.

    Args:
        base: Destination base path
        subfolder: Folder below the base, may be empty
        variant: Build variant being installed
        profile: Target platform conventions

    Returns:
        Normalized destination path
    """
    if not profile.multi_variant or not variant.suffix:
        return normalize_path(base, subfolder)
    return normalize_path(normalize_path(base) + variant.suffix, subfolder)


@dataclass(frozen=True)
class Destination:
    """A (base, subfolder) install destination."""
    base: str
    subfolder: str = ""

    def resolve(self, variant: BuildVariant, profile: PlatformProfile) -> str:
        return resolve(self.base, self.subfolder, variant, profile)

    def __str__(self):
        return normalize_path(self.base, self.subfolder)


DestinationLike = Union[str, Destination]


def as_destinations(values: Iterable[DestinationLike]) -> List[Destination]:
    """Coerce plain path strings into Destination objects."""
    return [v if isinstance(v, Destination) else Destination(str(v)) for v in values]
