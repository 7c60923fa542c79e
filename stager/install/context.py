"""
Configuration pass context.

A ConfigurationPass owns all state that lives for one install pass: the
export registry, the install manifest, the diagnostics trace, the targets
defined so far and the build-order dependencies between them. Install
operations receive it explicitly instead of reading global state.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import StagerConfig
from ..errors import UsageError
from .diagnostics import Diagnostics
from .manifest import Component, InstallManifest
from .platform import BuildVariant, PlatformProfile
from .registry import ExportRegistry
from .targets import Target


class ConfigurationPass:
    """State of one install pass."""

    def __init__(self, config: Optional[StagerConfig] = None,
                 profile: Optional[PlatformProfile] = None,
                 prefix: Optional[Union[str, Path]] = None,
                 build_dir: Union[str, Path] = ".",
                 source_dir: Union[str, Path] = ".",
                 variants: Optional[Sequence[BuildVariant]] = None,
                 components: Optional[Iterable[Component]] = None,
                 dry_run: bool = False,
                 diagnostics: Optional[Diagnostics] = None):
        self.config = config or StagerConfig()
        self.profile = profile or PlatformProfile.detect(multi_config=self.config.install.multi_config)
        self.build_dir = Path(build_dir)
        self.source_dir = Path(source_dir)

        if prefix is None:
            prefix = Path(self.config.install.prefix).expanduser()
        self.manifest = InstallManifest(prefix, components=components, dry_run=dry_run)

        if variants is None and self.config.install.variants:
            variants = [BuildVariant.parse(v) for v in self.config.install.variants]
        self.variants: Tuple[BuildVariant, ...] = tuple(variants) if variants else self.profile.default_variants()

        self.registry = ExportRegistry(enabled=self.config.options.install_package_config)
        self.diagnostics = diagnostics or Diagnostics()
        self.targets: Dict[str, Target] = {}
        self.plugin_targets: List[Target] = []
        self.dependencies: Dict[str, List[str]] = {}
        # target name -> (build tree include dir or None, install include dir)
        self.interface_includes: Dict[str, Tuple[Optional[Path], str]] = {}
        self.finalized = False

    @property
    def install_variants(self) -> Tuple[BuildVariant, ...]:
        """Variants whose destinations are installed in this pass."""
        if not self.profile.multi_variant:
            return (BuildVariant.DEFAULT,)
        return self.variants

    @property
    def package_name(self) -> str:
        return self.config.package.name

    @property
    def include_root(self) -> str:
        return self.profile.include_root(self.config.package.include_namespace)

    def define_target(self, target: Target) -> Target:
        """Make a target known to the pass. Names are unique."""
        if target.name in self.targets:
            raise UsageError(f"Target '{target.name}' is already defined")
        self.targets[target.name] = target
        if target.is_plugin:
            self.plugin_targets.append(target)
        return target

    def get_target(self, name: str) -> Target:
        try:
            return self.targets[name]
        except KeyError:
            raise UsageError(f"Unknown target '{name}'") from None

    def add_dependencies(self, name: str, dependencies: Iterable[str]):
        """Record that `name` may only be built after `dependencies`."""
        existing = self.dependencies.setdefault(name, [])
        for dependency in dependencies:
            if dependency not in existing:
                existing.append(dependency)

    def resolve_source(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.source_dir / path

    def resolve_output(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.build_dir / path
