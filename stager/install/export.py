"""
Export descriptor generation.

Writes `<Name>Targets.cmake`, the file that declares one namespaced
IMPORTED target per exported library:
- Install flavour: locations relative to the install prefix
- Build-tree flavour: locations pointing at the build outputs
"""

import logging
import posixpath
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .context import ConfigurationPass
from .platform import BuildVariant, PlatformKind

LOCATION_ROLES = ("library", "runtime")


def config_suffix(variant: BuildVariant) -> str:
    """CMake configuration name used in IMPORTED_LOCATION_<CONFIG>."""
    if variant is BuildVariant.DEFAULT:
        return "NOCONFIG"
    return variant.value.upper()


def unique_names(names: Sequence[str]) -> List[str]:
    """Drop repeated names, keeping first occurrence order."""
    return list(dict.fromkeys(names))


class ExportDescriptorWriter:
    """Renders the imported-targets file for the names in the export registry."""

    def __init__(self, context: ConfigurationPass):
        self.context = context

    @property
    def namespace(self) -> str:
        return self.context.config.package.export_namespace

    def render_install(self, names: Sequence[str], config_dir: str) -> str:
        """
        Render the install-tree descriptor.

        Args:
            names: Exported target names, duplicates allowed
            config_dir: Prefix-relative directory the descriptor is installed to

        Returns:
            Descriptor text
        """
        depth = len([p for p in config_dir.split("/") if p])
        content = self._header()
        content += "# Compute the installation prefix relative to this file.\n"
        content += 'get_filename_component(_IMPORT_PREFIX "${CMAKE_CURRENT_LIST_FILE}" PATH)\n'
        for _ in range(depth):
            content += 'get_filename_component(_IMPORT_PREFIX "${_IMPORT_PREFIX}" PATH)\n'
        content += 'if(_IMPORT_PREFIX STREQUAL "/")\n  set(_IMPORT_PREFIX "")\nendif()\n\n'

        for name in unique_names(names):
            locations = self._installed_locations(name)
            include = self.context.interface_includes.get(name)
            include_dir = self._install_path(include[1]) if include else None
            content += self._imported_target(name, locations, include_dir)

        content += "set(_IMPORT_PREFIX)\n"
        content += self._footer()
        return content

    def render_build_tree(self, names: Sequence[str]) -> str:
        """Render the descriptor used from the build tree without installing."""
        content = self._header()
        for name in unique_names(names):
            locations = self._build_locations(name)
            include = self.context.interface_includes.get(name)
            include_dir = include[0].absolute().as_posix() if include and include[0] else None
            content += self._imported_target(name, locations, include_dir)
        content += self._footer()
        return content

    def write(self, path: Path, content: str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def _header(self) -> str:
        return (
            f"# Generated by stager for {self.context.package_name}. Do not edit.\n"
            "\n"
            "cmake_policy(PUSH)\n"
            "cmake_policy(VERSION 3.10)\n"
            "\n"
        )

    def _footer(self) -> str:
        return "cmake_policy(POP)\n"

    def _install_path(self, destination: str) -> str:
        if posixpath.isabs(destination):
            return destination
        return "${_IMPORT_PREFIX}/" + destination

    def _installed_locations(self, name: str) -> Dict[BuildVariant, Tuple[Optional[str], Optional[str]]]:
        """(location, import library) per variant, taken from the install log."""
        locations: Dict[BuildVariant, Tuple[Optional[str], Optional[str]]] = {}
        for record in self.context.manifest.records_for(name, roles=LOCATION_ROLES + ("archive",)):
            location, implib = locations.get(record.variant, (None, None))
            path = self._install_path(record.destination)
            if record.role in LOCATION_ROLES and location is None:
                location = path
            elif record.role == "archive":
                implib = path
            locations[record.variant] = (location, implib)
        if not locations:
            logging.debug(f"No installed files recorded for exported target {name}")
        return locations

    def _build_locations(self, name: str) -> Dict[BuildVariant, Tuple[Optional[str], Optional[str]]]:
        ctx = self.context
        target = ctx.targets.get(name)
        if target is None:
            return {}

        def as_path(path):
            return ctx.resolve_output(path).absolute().as_posix() if path else None

        locations = {}
        for variant in ctx.install_variants:
            outputs = target.outputs_for(variant)
            if ctx.profile.kind is PlatformKind.WINDOWS:
                location = outputs.runtime or outputs.library
            else:
                location = outputs.library or outputs.runtime
            locations[variant] = (as_path(location), as_path(outputs.archive))
        return locations

    def _imported_target(self, name: str, locations: Dict[BuildVariant, Tuple[Optional[str], Optional[str]]],
                         include_dir: Optional[str]) -> str:
        alias = f"{self.namespace}{name}"
        has_location = any(location for location, _ in locations.values())
        library_type = "SHARED" if has_location or not locations else "STATIC"

        content = f"# Create imported target {alias}\n"
        content += f"if(NOT TARGET {alias})\n"
        content += f"  add_library({alias} {library_type} IMPORTED)\n"
        content += "endif()\n"
        if include_dir:
            content += f"set_target_properties({alias} PROPERTIES\n"
            content += f'  INTERFACE_INCLUDE_DIRECTORIES "{include_dir}"\n'
            content += ")\n"

        for variant, (location, implib) in locations.items():
            config = config_suffix(variant)
            if library_type == "STATIC":
                location, implib = implib, None
            content += f"set_property(TARGET {alias} APPEND PROPERTY IMPORTED_CONFIGURATIONS {config})\n"
            content += f"set_target_properties({alias} PROPERTIES\n"
            if location:
                content += f'  IMPORTED_LOCATION_{config} "{location}"\n'
            if implib and self.context.profile.kind is PlatformKind.WINDOWS:
                content += f'  IMPORTED_IMPLIB_{config} "{implib}"\n'
            content += ")\n"
        content += "\n"
        return content
