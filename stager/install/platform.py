"""
Platform profiles for artifact installation.

Every platform-dependent decision (single vs multi-variant output trees,
shared-object name links, package directory layout) is answered by a
PlatformProfile, so callers never branch on the host OS themselves.
"""

import platform
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class BuildVariant(str, Enum):
    DEFAULT = "Default"
    DEBUG = "Debug"
    RELEASE = "Release"
    REL_WITH_DEB_INFO = "RelWithDebInfo"

    @property
    def suffix(self) -> str:
        """Suffix appended to the destination base on multi-variant platforms."""
        if self is BuildVariant.DEBUG:
            return "_debug"
        if self is BuildVariant.REL_WITH_DEB_INFO:
            return "_withDebInfo"
        return ""

    @classmethod
    def parse(cls, value: str) -> "BuildVariant":
        for variant in cls:
            if variant.value.lower() == value.lower():
                return variant
        valid = ", ".join(v.value for v in cls)
        raise ValueError(f"Unknown build variant '{value}'. Valid values are: {valid}")


class PlatformKind(str, Enum):
    LINUX = "linux"      # POSIX, non-Apple
    MACOS = "macos"      # Apple bundle layout
    WINDOWS = "windows"  # and anything else


@dataclass(frozen=True)
class InstallDirs:
    """GNU-style install directories, relative to the install prefix."""
    bindir: str = "bin"
    libdir: str = "lib"
    includedir: str = "include"
    datadir: str = "share"


@dataclass(frozen=True)
class PackageLayout:
    """Resolved directory constants written into the package config."""
    config_dir: str
    include_dir: str
    lib_dir: str
    plugin_dir: str


@dataclass(frozen=True)
class PlatformProfile:
    """Install conventions of one target platform."""
    kind: PlatformKind = PlatformKind.LINUX
    multi_config: bool = False  # e.g. Visual Studio generators
    dirs: InstallDirs = field(default_factory=InstallDirs)

    @property
    def multi_variant(self) -> bool:
        """True when every build variant gets its own destination tree."""
        return self.kind is PlatformKind.WINDOWS and self.multi_config

    @property
    def uses_namelinks(self) -> bool:
        """Shared-object platforms install a development-only name link."""
        return self.kind is not PlatformKind.WINDOWS

    def default_variants(self):
        if self.multi_variant:
            return (BuildVariant.DEBUG, BuildVariant.RELEASE, BuildVariant.REL_WITH_DEB_INFO)
        return (BuildVariant.DEFAULT,)

    def include_root(self, namespace: str) -> str:
        return posixpath.join(self.dirs.includedir, namespace)

    def package_layout(self, package_name: str, namespace: str,
                       bundle_dir: Optional[str] = None,
                       dest_folder: Optional[str] = None) -> PackageLayout:
        """
        Resolve the package config directory constants for this platform.

        Args:
            package_name: Package name, used for the config directory
            namespace: Lower-case include/library namespace
            bundle_dir: Application bundle directory (Apple only)
            dest_folder: Application install folder (Windows/other only)

        Returns:
            PackageLayout with install-prefix relative directories
        """
        config_dir = posixpath.join(self.dirs.libdir, "cmake", package_name)
        include_dir = self.include_root(namespace)

        if self.kind is PlatformKind.LINUX:
            lib_dir = posixpath.join(self.dirs.libdir, namespace)
            plugin_dir = posixpath.join(lib_dir, "plugins")
        elif self.kind is PlatformKind.MACOS:
            lib_dir = self.dirs.libdir
            plugin_dir = posixpath.join(bundle_dir or f"{package_name}.app", "Contents", "PlugIns")
        else:
            lib_dir = self.dirs.libdir
            plugin_dir = posixpath.join(dest_folder or package_name, "plugins")

        return PackageLayout(
            config_dir=config_dir,
            include_dir=include_dir,
            lib_dir=lib_dir,
            plugin_dir=plugin_dir,
        )

    @classmethod
    def detect(cls, multi_config: bool = False) -> "PlatformProfile":
        """Build the profile of the host running this process."""
        system = platform.system()
        if system == "Linux" or system.endswith("BSD"):
            kind = PlatformKind.LINUX
        elif system == "Darwin":
            kind = PlatformKind.MACOS
        else:
            kind = PlatformKind.WINDOWS
        return cls(kind=kind, multi_config=multi_config)

    @classmethod
    def for_name(cls, name: str, multi_config: bool = False) -> "PlatformProfile":
        try:
            kind = PlatformKind(name.lower())
        except ValueError:
            valid = ", ".join(k.value for k in PlatformKind)
            raise ValueError(f"Unknown platform '{name}'. Valid values are: {valid}") from None
        return cls(kind=kind, multi_config=multi_config)
