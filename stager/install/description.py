"""
Build descriptions.

A build description is a TOML file listing the built targets and the
ordered install steps to run against them:

    [[targets]]
    name = "CoreLib"
    export = true
    [targets.outputs.Default]
    library = "lib/libCoreLib.so.1"
    namelink = "lib/libCoreLib.so"

    [[steps]]
    op = "install-shared"
    target = "CoreLib"
    headers_dir = "libs/CoreLib/include"

    [[steps]]
    op = "package-config"
    version = "2.13.0"

Steps run in file order; "package-config" belongs at the end.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import toml

from ..errors import ConfigError, UsageError
from .context import ConfigurationPass
from .destinations import Destination
from .installer import ArtifactInstaller, FilesRequest, HeaderRequest, SharedArtifactRequest
from .manifest import Component, InstallRecord
from .package_config import PackageConfigGenerator, PackageConfigRequest, PackageConfigResult
from .plugins import PluginInstallRequest, PluginOrchestrator
from .targets import Target

STEP_OPERATIONS = ("install-shared", "install-files", "install-headers", "install-plugins", "package-config")


@dataclass
class DescriptionResult:
    records: List[InstallRecord] = field(default_factory=list)
    package: Optional[PackageConfigResult] = None
    steps_run: int = 0


def _destinations(step: Dict[str, Any]) -> Optional[List[Destination]]:
    if "destinations" not in step:
        return None
    destinations = []
    for value in step["destinations"]:
        if isinstance(value, dict):
            destinations.append(Destination(value.get("base", ""), value.get("subfolder", "")))
        else:
            destinations.append(Destination(str(value)))
    return destinations


@dataclass
class BuildDescription:
    """Targets and install steps of one project."""
    targets: List[Target] = field(default_factory=list)
    steps: List[Dict[str, Any]] = field(default_factory=list)
    source: Optional[Path] = None

    @classmethod
    def load(cls, path: Union[str, Path]) -> "BuildDescription":
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = toml.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Build description not found: {path}") from e
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Could not parse build description {path}: {e}") from e
        description = cls.from_dict(data)
        description.source = path
        return description

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildDescription":
        try:
            targets = [Target.from_dict(t) for t in data.get("targets", [])]
        except ValueError as e:
            raise ConfigError(f"Invalid target definition: {e}") from e
        steps = list(data.get("steps", []))
        for index, step in enumerate(steps):
            if "op" not in step:
                raise ConfigError(f"Step {index + 1} has no 'op'")
            if step["op"] not in STEP_OPERATIONS:
                raise UsageError(f"Unknown install step '{step['op']}'. "
                                 f"Valid values are: {', '.join(STEP_OPERATIONS)}")
        return cls(targets=targets, steps=steps)

    def run(self, context: ConfigurationPass) -> DescriptionResult:
        """Define every target on the pass, then replay the steps in order."""
        for target in self.targets:
            context.define_target(target)

        installer = ArtifactInstaller(context)
        handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "install-shared": lambda step: installer.install_shared_artifact(SharedArtifactRequest(
                target=context.get_target(step.get("target", "")),
                destinations=_destinations(step),
                export=step.get("export", context.get_target(step.get("target", "")).export),
                headers=step.get("headers", []),
                headers_dir=step.get("headers_dir"),
                headers_dest=step.get("headers_dest"),
            )),
            "install-files": lambda step: installer.install_files(FilesRequest(
                files=step.get("files", []),
                destinations=_destinations(step),
            )),
            "install-headers": lambda step: installer.install_headers(HeaderRequest(
                target=step.get("target"),
                headers=step.get("headers", []),
                headers_dir=step.get("headers_dir"),
                destination=step.get("destination"),
                component=Component(step.get("component", Component.DEVELOPMENT.value)),
            )),
            "install-plugins": lambda step: PluginOrchestrator(context, installer).install_plugins(
                PluginInstallRequest(
                    dest_path=step.get("dest_path"),
                    dest_folder=step.get("dest_folder", ""),
                    shader_dest_path=step.get("shader_dest_path"),
                    shader_dest_folder=step.get("shader_dest_folder", ""),
                    types=step.get("types"),
                    aggregate_target=step.get("aggregate_target"),
                )
            ),
            "package-config": lambda step: PackageConfigGenerator(context).generate(PackageConfigRequest(
                version=step.get("version"),
                compatibility=step.get("compatibility"),
                template=step.get("template"),
                variables=dict(step.get("variables", {})),
            )),
        }

        result = DescriptionResult()
        for step in self.steps:
            outcome = handlers[step["op"]](step)
            if isinstance(outcome, PackageConfigResult):
                result.package = outcome
            elif isinstance(outcome, list):
                result.records.extend(outcome)
            result.steps_run += 1
        return result
