"""Build targets handed to the installer."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..errors import UsageError
from .platform import BuildVariant


class TargetKind(str, Enum):
    LIBRARY = "library"
    PLUGIN = "plugin"
    FILES = "files"


class PluginType(str, Enum):
    GRAPHICS = "graphics"
    IO = "io"
    STANDARD = "standard"

    @classmethod
    def parse(cls, value) -> "PluginType":
        """Parse a plugin type name; 'gl' is accepted for graphics."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "gl":
            return cls.GRAPHICS
        for plugin_type in cls:
            if plugin_type.value == name:
                return plugin_type
        valid = ", ".join(t.value for t in cls)
        raise UsageError(f"Invalid plugin type '{value}'. Valid values are: {valid}")


ALL_PLUGIN_TYPES = (PluginType.GRAPHICS, PluginType.IO, PluginType.STANDARD)


@dataclass
class TargetOutputs:
    """Build outputs of a target for one build variant. Roles may coincide."""
    runtime: Optional[Path] = None   # loadable artifact (.dll, executable)
    library: Optional[Path] = None   # shared object (.so, .dylib)
    namelink: Optional[Path] = None  # unversioned link to the shared object
    archive: Optional[Path] = None   # static library or import library

    def is_empty(self) -> bool:
        return not (self.runtime or self.library or self.namelink or self.archive)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TargetOutputs":
        return cls(**{role: Path(data[role]) for role in ("runtime", "library", "namelink", "archive")
                      if data.get(role)})


@dataclass
class Target:
    """A named build output subject to installation."""
    name: str
    kind: TargetKind = TargetKind.LIBRARY
    plugin_type: Optional[PluginType] = None
    export: bool = False
    outputs: Dict[BuildVariant, TargetOutputs] = field(default_factory=dict)
    sources: List[Path] = field(default_factory=list)
    shader_folder_name: Optional[str] = None
    shader_folder_path: Optional[Path] = None

    def __post_init__(self):
        if not self.name:
            raise UsageError("Target name must not be empty")
        if self.kind is TargetKind.PLUGIN and self.plugin_type is None:
            self.plugin_type = PluginType.STANDARD

    @property
    def is_plugin(self) -> bool:
        return self.kind is TargetKind.PLUGIN

    def outputs_for(self, variant: BuildVariant) -> TargetOutputs:
        """Outputs for a variant, falling back to the Default outputs."""
        if variant in self.outputs:
            return self.outputs[variant]
        return self.outputs.get(BuildVariant.DEFAULT, TargetOutputs())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Target":
        """Create a Target from a build description table."""
        kind = TargetKind(data.get("kind", "library"))
        plugin_type = PluginType.parse(data["plugin_type"]) if data.get("plugin_type") else None

        outputs = {}
        for variant_name, output_data in data.get("outputs", {}).items():
            outputs[BuildVariant.parse(variant_name)] = TargetOutputs.from_dict(output_data)

        shader_path = data.get("shader_folder_path")
        return cls(
            name=data.get("name", ""),
            kind=kind,
            plugin_type=plugin_type,
            export=data.get("export", False),
            outputs=outputs,
            sources=[Path(s) for s in data.get("sources", [])],
            shader_folder_name=data.get("shader_folder_name"),
            shader_folder_path=Path(shader_path) if shader_path else None,
        )
