"""
Stager Install Module

Artifact installation and package export:
- Destination resolution per platform and build variant
- Shared library, file and header installation
- Plugin installation with shader resources
- Export registry and CMake package config generation
"""

from .platform import BuildVariant, PlatformKind, PlatformProfile, InstallDirs, PackageLayout
from .destinations import Destination, normalize_path, resolve
from .registry import ExportRegistry
from .targets import Target, TargetKind, TargetOutputs, PluginType
from .manifest import Component, InstallManifest, InstallRecord
from .diagnostics import Diagnostics
from .context import ConfigurationPass
from .installer import ArtifactInstaller, SharedArtifactRequest, FilesRequest, HeaderRequest
from .plugins import PluginOrchestrator, PluginInstallRequest
from .package_config import (
    Compatibility,
    PackageConfigGenerator,
    PackageConfigRequest,
    PackageConfigResult,
    VersionInfo,
    parse_version,
)
from .description import BuildDescription

__all__ = [
    'BuildVariant',
    'PlatformKind',
    'PlatformProfile',
    'InstallDirs',
    'PackageLayout',
    'Destination',
    'normalize_path',
    'resolve',
    'ExportRegistry',
    'Target',
    'TargetKind',
    'TargetOutputs',
    'PluginType',
    'Component',
    'InstallManifest',
    'InstallRecord',
    'Diagnostics',
    'ConfigurationPass',
    'ArtifactInstaller',
    'SharedArtifactRequest',
    'FilesRequest',
    'HeaderRequest',
    'PluginOrchestrator',
    'PluginInstallRequest',
    'Compatibility',
    'PackageConfigGenerator',
    'PackageConfigRequest',
    'PackageConfigResult',
    'VersionInfo',
    'parse_version',
    'BuildDescription',
]
