"""
Plugin installation.

Filters the plugin targets of a pass by type, installs the matching ones and
copies the shader sources of graphics plugins next to the application.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import UsageError
from .context import ConfigurationPass
from .destinations import Destination, normalize_path
from .installer import ArtifactInstaller
from .manifest import InstallRecord
from .targets import ALL_PLUGIN_TYPES, PluginType, Target

SHADER_SUFFIXES = (".vert", ".frag")


@dataclass
class PluginInstallRequest:
    """Arguments of install_plugins."""
    dest_path: Optional[str] = None
    dest_folder: str = ""
    shader_dest_path: Optional[str] = None
    shader_dest_folder: str = ""
    types: Optional[Sequence[Union[str, PluginType]]] = None  # defaults to every type
    candidates: Optional[Sequence[Target]] = None  # defaults to the plugins of the pass
    aggregate_target: Optional[str] = None  # defaults to the package name


class PluginOrchestrator:
    """Installs plugins of the requested types."""

    def __init__(self, context: ConfigurationPass, installer: Optional[ArtifactInstaller] = None):
        self.context = context
        self.installer = installer or ArtifactInstaller(context)

    def requested_types(self, types) -> List[PluginType]:
        if not types:
            return list(ALL_PLUGIN_TYPES)
        if isinstance(types, (str, PluginType)):
            types = [types]
        return [PluginType.parse(t) for t in types]

    def install_plugins(self, request: PluginInstallRequest) -> List[InstallRecord]:
        """
        Install every candidate plugin whose type was requested.

        Args:
            request: Destinations, type filter and candidate plugins

        Returns:
            Install records of plugin binaries and shader files

        Raises:
            UsageError: Unknown type, missing destination, or missing shader
                destination while graphics plugins are requested
        """
        ctx = self.context
        types = self.requested_types(request.types)

        if not request.dest_path:
            raise UsageError("install_plugins: dest_path not specified")
        if PluginType.GRAPHICS in types and not request.shader_dest_path:
            raise UsageError("install_plugins: shader_dest_path not specified")

        ctx.diagnostics.status("Install plugins")
        ctx.diagnostics.status(f" Types: {', '.join(t.value for t in types)}")
        ctx.diagnostics.status(f" Destination: {normalize_path(request.dest_path, request.dest_folder)}")
        if PluginType.GRAPHICS in types:
            ctx.diagnostics.status(
                f" Shader Destination: {normalize_path(request.shader_dest_path, request.shader_dest_folder)}"
            )

        candidates = list(ctx.plugin_targets if request.candidates is None else request.candidates)
        if candidates:
            ctx.add_dependencies(request.aggregate_target or ctx.package_name, [p.name for p in candidates])

        destination = Destination(request.dest_path, request.dest_folder)
        records = []
        for plugin in candidates:
            if plugin.plugin_type not in types:
                continue
            ctx.diagnostics.status(f" Install {plugin.name} ({plugin.plugin_type.value})")
            records.extend(self.installer.install_target(plugin, destination))

            if plugin.plugin_type is PluginType.GRAPHICS:
                records.extend(self._install_shaders(plugin, request))
        return records

    def _install_shaders(self, plugin: Target, request: PluginInstallRequest) -> List[InstallRecord]:
        ctx = self.context
        if not plugin.shader_folder_path:
            return []
        folder = ctx.resolve_source(plugin.shader_folder_path)
        if not folder.exists():
            return []

        folder_name = plugin.shader_folder_name or folder.name
        ctx.diagnostics.status(f"  + shader: {folder_name} ({folder})")

        if plugin.sources:
            sources = [ctx.resolve_source(s) for s in plugin.sources]
        else:
            sources = sorted(p for p in folder.iterdir() if p.is_file())
        shader_files = [s for s in sources if Path(s).suffix in SHADER_SUFFIXES]

        destination = Destination(
            request.shader_dest_path,
            normalize_path(request.shader_dest_folder, folder_name),
        )
        return self.installer.copy_files(shader_files, destination, target=plugin.name, role="shader")
