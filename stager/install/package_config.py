"""
Package configuration generation.

Run once, after every target has been installed. Produces the files that
let a downstream CMake build call find_package() on the installed tree:
- <Name>Config.cmake rendered from a @VAR@ template
- <Name>ConfigVersion.cmake implementing the compatibility mode
- <Name>Targets.cmake for the exported targets, plus a build-tree copy
"""

import hashlib
import posixpath
import re
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import ConfigError, UsageError
from .context import ConfigurationPass
from .export import ExportDescriptorWriter
from .manifest import Component
from .platform import PackageLayout

DEFAULT_VERSION = "1.0.0"
DEFAULT_QT_VERSION_MAJOR = 5
VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.?(\d*)$")
TEMPLATE_VARIABLE = re.compile(r"@([A-Za-z_][A-Za-z0-9_]*)@")


class Compatibility(str, Enum):
    ANY_NEWER_VERSION = "AnyNewerVersion"
    SAME_MAJOR_VERSION = "SameMajorVersion"
    SAME_MINOR_VERSION = "SameMinorVersion"
    EXACT_VERSION = "ExactVersion"

    @classmethod
    def parse(cls, value) -> "Compatibility":
        """Accept 'SameMajorVersion' as well as 'same-major-version'."""
        if isinstance(value, cls):
            return value
        key = str(value).replace("-", "").replace("_", "").lower()
        for mode in cls:
            if mode.value.lower() == key:
                return mode
        valid = ", ".join(m.value for m in cls)
        raise UsageError(f"Invalid compatibility '{value}'. Valid values are: {valid}")


@dataclass(frozen=True)
class VersionInfo:
    """A version string and its parsed components.

    When the string does not look like MAJOR.MINOR[.PATCH] the major and
    minor components stay empty; callers must check `matched`.
    """
    version: str
    major: str
    minor: str
    patch: str

    @property
    def matched(self) -> bool:
        return bool(self.major)


def parse_version(version: str) -> VersionInfo:
    match = VERSION_PATTERN.match(version)
    if not match:
        return VersionInfo(version=version, major="", minor="", patch="0")
    major, minor, patch = match.groups()
    return VersionInfo(version=version, major=major, minor=minor, patch=patch or "0")


def configure_template(text: str, variables: Dict[str, str]) -> str:
    """Replace @VAR@ references; unknown variables expand to nothing."""
    return TEMPLATE_VARIABLE.sub(lambda m: str(variables.get(m.group(1), "")), text)


def package_init_block(config_dir: str) -> str:
    """The text @PACKAGE_INIT@ expands to for a config installed to `config_dir`."""
    up = "../" * len([p for p in config_dir.split("/") if p])
    return (
        "####### Expanded from @PACKAGE_INIT@ by stager #######\n"
        f'get_filename_component(PACKAGE_PREFIX_DIR "${{CMAKE_CURRENT_LIST_DIR}}/{up}" ABSOLUTE)\n'
        "\n"
        "macro(set_and_check _var _file)\n"
        '  set(${_var} "${_file}")\n'
        '  if(NOT EXISTS "${_file}")\n'
        '    message(FATAL_ERROR "File or directory ${_file} referenced by variable ${_var} does not exist !")\n'
        "  endif()\n"
        "endmacro()\n"
        "\n"
        "macro(check_required_components _NAME)\n"
        "  foreach(comp ${${_NAME}_FIND_COMPONENTS})\n"
        "    if(NOT ${_NAME}_${comp}_FOUND)\n"
        "      if(${_NAME}_FIND_REQUIRED_${comp})\n"
        "        set(${_NAME}_FOUND FALSE)\n"
        "      endif()\n"
        "    endif()\n"
        "  endforeach()\n"
        "endmacro()\n"
        "\n"
        "####################################################################################"
    )


def render_version_file(info: VersionInfo, compatibility: Compatibility) -> str:
    """Render <Name>ConfigVersion.cmake for a version and compatibility mode."""
    content = "# Generated by stager. Do not edit.\n"
    content += f'set(PACKAGE_VERSION "{info.version}")\n\n'
    content += "if(PACKAGE_VERSION VERSION_LESS PACKAGE_FIND_VERSION)\n"
    content += "  set(PACKAGE_VERSION_COMPATIBLE FALSE)\n"
    content += "else()\n"

    if compatibility is Compatibility.ANY_NEWER_VERSION:
        condition = None
    elif compatibility is Compatibility.SAME_MAJOR_VERSION:
        condition = f'PACKAGE_FIND_VERSION_MAJOR STREQUAL "{info.major}"'
    elif compatibility is Compatibility.SAME_MINOR_VERSION:
        condition = (f'PACKAGE_FIND_VERSION_MAJOR STREQUAL "{info.major}" AND '
                     f'PACKAGE_FIND_VERSION_MINOR STREQUAL "{info.minor}"')
    else:
        condition = "PACKAGE_FIND_VERSION STREQUAL PACKAGE_VERSION"

    if condition is None:
        content += "  set(PACKAGE_VERSION_COMPATIBLE TRUE)\n"
    else:
        content += f"  if({condition})\n"
        content += "    set(PACKAGE_VERSION_COMPATIBLE TRUE)\n"
        content += "  else()\n"
        content += "    set(PACKAGE_VERSION_COMPATIBLE FALSE)\n"
        content += "  endif()\n"

    content += "\n  if(PACKAGE_FIND_VERSION STREQUAL PACKAGE_VERSION)\n"
    content += "    set(PACKAGE_VERSION_EXACT TRUE)\n"
    content += "  endif()\n"
    content += "endif()\n"
    return content


def detect_qt_version_major(override: Optional[int] = None) -> int:
    """Major version of the Qt toolchain on PATH, used for diagnostics only."""
    if override:
        return int(override)
    if shutil.which("qmake6"):
        return 6
    if shutil.which("qmake-qt5") or shutil.which("qmake"):
        return 5
    return DEFAULT_QT_VERSION_MAJOR


def register_package(name: str, config_dir: Path, registry_dir: Union[str, Path]) -> Path:
    """
    Add a user package registry entry so find_package() locates `config_dir`.

    The entry is a file named after the MD5 of the directory, containing the
    directory path, under <registry_dir>/<name>/.
    """
    config_dir = Path(config_dir).absolute()
    entry_dir = Path(registry_dir).expanduser() / name
    entry_dir.mkdir(parents=True, exist_ok=True)
    entry = entry_dir / hashlib.md5(str(config_dir).encode("utf-8")).hexdigest()
    with open(entry, 'w', encoding='utf-8') as f:
        f.write(f"{config_dir}\n")
    return entry


@dataclass
class PackageConfigRequest:
    """Arguments of generate_package_config."""
    version: Optional[str] = None
    compatibility: Optional[Union[str, Compatibility]] = None
    template: Optional[Union[str, Path]] = None
    variables: Dict[str, str] = field(default_factory=dict)


@dataclass
class PackageConfigResult:
    version: VersionInfo
    compatibility: Compatibility
    layout: PackageLayout
    config_file: Path
    version_file: Path
    targets_file: Optional[Path] = None
    build_targets_file: Optional[Path] = None
    registry_entry: Optional[Path] = None


class PackageConfigGenerator:
    """Generates and installs the package description of one pass."""

    def __init__(self, context: ConfigurationPass):
        self.context = context

    def resolve_version(self, request: PackageConfigRequest) -> VersionInfo:
        version = request.version or self.context.config.package.version or DEFAULT_VERSION
        if not isinstance(version, str):
            # TOML reads 2.10 as the float 2.1
            raise ConfigError(f"Package version must be a quoted string, got {version!r}")
        return parse_version(version)

    def resolve_layout(self) -> PackageLayout:
        ctx = self.context
        return ctx.profile.package_layout(
            ctx.package_name,
            ctx.config.package.include_namespace,
            bundle_dir=ctx.config.install.bundle_dir,
            dest_folder=ctx.config.install.dest_folder,
        )

    def template_path(self, request: PackageConfigRequest) -> Path:
        ctx = self.context
        template = request.template or ctx.config.package.config_template
        if template:
            return ctx.resolve_source(template)
        return ctx.source_dir / "cmake" / f"{ctx.package_name}Config.cmake.in"

    def generate(self, request: Optional[PackageConfigRequest] = None) -> Optional[PackageConfigResult]:
        """
        Generate, write and install the package configuration files.

        Args:
            request: Version, compatibility, template and extra template variables

        Returns:
            PackageConfigResult, or None when generation is disabled or the
            template is missing
        """
        ctx = self.context
        request = request or PackageConfigRequest()
        diag = ctx.diagnostics
        name = ctx.package_name

        if not ctx.config.options.install_package_config:
            diag.status(f"{name} CMake config installation is disabled")
            return None

        info = self.resolve_version(request)
        compatibility = Compatibility.parse(request.compatibility or ctx.config.package.compatibility)

        diag.status("")
        diag.status(f"=== {name} CMake Package Configuration ===")
        diag.status(f"  Version: {info.version}")
        if not info.matched:
            diag.warning(f"Version '{info.version}' does not match MAJOR.MINOR[.PATCH]; "
                         "major and minor version are left empty")

        layout = self.resolve_layout()
        diag.status(f"  Config install dir: {layout.config_dir}")
        diag.status(f"  Include install dir: {layout.include_dir}")
        diag.status(f"  Library install dir: {layout.lib_dir}")
        diag.status(f"  Plugin install dir: {layout.plugin_dir}")

        qt_major = detect_qt_version_major(ctx.config.package.qt_version_major)
        diag.status(f"  Qt version: {qt_major}")

        template = self.template_path(request)
        if not template.exists():
            diag.warning(f"{name}Config.cmake.in not found at {template}")
            diag.warning("Please create this file to enable CMake package configuration")
            return None

        output_dir = ctx.build_dir / "cmake"
        output_dir.mkdir(parents=True, exist_ok=True)
        config_file = output_dir / f"{name}Config.cmake"
        version_file = output_dir / f"{name}ConfigVersion.cmake"

        with open(template, 'r', encoding='utf-8') as f:
            template_text = f.read()
        with open(config_file, 'w', encoding='utf-8') as f:
            f.write(configure_template(template_text, self.template_variables(info, layout, qt_major, request)))
        with open(version_file, 'w', encoding='utf-8') as f:
            f.write(render_version_file(info, compatibility))

        for generated in (config_file, version_file):
            ctx.manifest.install_file(generated, layout.config_dir, Component.DEVELOPMENT, role="config")

        result = PackageConfigResult(
            version=info,
            compatibility=compatibility,
            layout=layout,
            config_file=config_file,
            version_file=version_file,
        )

        exported = ctx.registry.snapshot()
        if exported:
            diag.status(f"  Export targets: {';'.join(exported)}")
            writer = ExportDescriptorWriter(ctx)
            install_targets = writer.write(
                output_dir / "export" / f"{name}Targets.cmake",
                writer.render_install(exported, layout.config_dir),
            )
            record = ctx.manifest.install_file(install_targets, layout.config_dir, Component.DEVELOPMENT,
                                               role="config")
            result.targets_file = ctx.manifest.absolute(record.destination)
            result.build_targets_file = writer.write(
                output_dir / f"{name}Targets.cmake",
                writer.render_build_tree(exported),
            )
        else:
            diag.warning("  No targets marked for export. Use export=True with install_shared_artifact.")

        if ctx.config.options.register_package:
            result.registry_entry = register_package(name, output_dir, ctx.config.options.package_registry_dir)
            diag.status("  Registered in CMake package registry")

        diag.status("=" * 49)
        diag.status("")
        ctx.finalized = True
        return result

    def template_variables(self, info: VersionInfo, layout: PackageLayout, qt_major: int,
                           request: PackageConfigRequest) -> Dict[str, str]:
        """Variables available to the config template."""
        ctx = self.context
        prefix = ctx.config.package.variable_prefix
        path_vars = {
            f"{prefix}_INCLUDE_INSTALL_DIR": layout.include_dir,
            f"{prefix}_LIB_INSTALL_DIR": layout.lib_dir,
            f"{prefix}_PLUGIN_INSTALL_DIR": layout.plugin_dir,
        }
        variables = {
            "PACKAGE_NAME": ctx.package_name,
            "PACKAGE_VERSION": info.version,
            "PROJECT_VERSION": info.version,
            "PROJECT_VERSION_MAJOR": info.major,
            "PROJECT_VERSION_MINOR": info.minor,
            "PROJECT_VERSION_PATCH": info.patch,
            "QT_VERSION_MAJOR": str(qt_major),
            f"{prefix}_CONFIG_INSTALL_DIR": layout.config_dir,
            "PACKAGE_INIT": package_init_block(layout.config_dir),
        }
        variables.update(path_vars)
        for var, value in path_vars.items():
            if posixpath.isabs(value):
                variables[f"PACKAGE_{var}"] = value
            else:
                variables[f"PACKAGE_{var}"] = "${PACKAGE_PREFIX_DIR}/" + value
        variables.update(request.variables)
        return variables
