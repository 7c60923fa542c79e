"""
Global configuration for Stager - package identity, install destinations
and the global switches that gate package config generation.
"""
import os
import re
import toml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .errors import ConfigError


ENV_PREFIX = "STAGER_"
_TRUE_VALUES = {"1", "true", "on", "yes"}
_FALSE_VALUES = {"0", "false", "off", "no", ""}


@dataclass
class PackageSettings:
    """Identity of the generated package."""
    name: str = "Project"
    version: Optional[str] = None
    compatibility: str = "SameMajorVersion"
    namespace: Optional[str] = None  # include/lib namespace, defaults to lower-case name
    config_template: Optional[str] = None
    qt_version_major: Optional[int] = None

    @property
    def include_namespace(self) -> str:
        return self.namespace or self.name.lower()

    @property
    def export_namespace(self) -> str:
        return f"{self.name}::"

    @property
    def variable_prefix(self) -> str:
        return re.sub(r"[^A-Za-z0-9]", "_", self.name).upper()


@dataclass
class InstallSettings:
    """Where things go."""
    prefix: str = "install"
    destinations: List[str] = field(default_factory=list)
    linux_shared_destination: Optional[str] = None
    bundle_dir: Optional[str] = None   # Apple application bundle
    dest_folder: Optional[str] = None  # Windows application folder
    multi_config: bool = False
    variants: List[str] = field(default_factory=list)


@dataclass
class OptionSettings:
    """Global switches."""
    install_package_config: bool = True
    register_package: bool = False
    package_registry_dir: str = "~/.cmake/packages"


@dataclass
class StagerConfig:
    """Global Stager configuration."""
    verbose: bool = False
    package: PackageSettings = field(default_factory=PackageSettings)
    install: InstallSettings = field(default_factory=InstallSettings)
    options: OptionSettings = field(default_factory=OptionSettings)

    @classmethod
    def load(cls, config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> 'StagerConfig':
        """Load configuration from file, then apply environment overrides."""
        if config_path is None:
            config_path = Path("stager.toml")
        config_path = Path(config_path)

        if not config_path.exists():
            config = cls()
        else:
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    data = toml.load(f)
            except toml.TomlDecodeError as e:
                raise ConfigError(f"Could not parse config {config_path}: {e}") from e
            config = cls.from_dict(data)

        config.apply_environment(os.environ if environ is None else environ)
        return config

    @classmethod
    def from_dict(cls, data: dict) -> 'StagerConfig':
        """Create StagerConfig from dictionary data."""
        package_data = data.get('package', {})
        package = PackageSettings(
            name=package_data.get('name', "Project"),
            version=package_data.get('version'),
            compatibility=package_data.get('compatibility', "SameMajorVersion"),
            namespace=package_data.get('namespace'),
            config_template=package_data.get('config_template'),
            qt_version_major=package_data.get('qt_version_major'),
        )

        install_data = data.get('install', {})
        install = InstallSettings(
            prefix=install_data.get('prefix', "install"),
            destinations=list(install_data.get('destinations', [])),
            linux_shared_destination=install_data.get('linux_shared_destination'),
            bundle_dir=install_data.get('bundle_dir'),
            dest_folder=install_data.get('dest_folder'),
            multi_config=install_data.get('multi_config', False),
            variants=list(install_data.get('variants', [])),
        )

        options_data = data.get('options', {})
        options = OptionSettings(
            install_package_config=options_data.get('install_package_config', True),
            register_package=options_data.get('register_package', False),
            package_registry_dir=options_data.get('package_registry_dir', "~/.cmake/packages"),
        )

        return cls(
            verbose=data.get('stager', {}).get('verbose', False),
            package=package,
            install=install,
            options=options,
        )

    def apply_environment(self, environ: Mapping[str, str]):
        """Override the global switches from STAGER_* environment variables."""
        for name in ('install_package_config', 'register_package'):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                setattr(self.options, name, _parse_bool(raw, ENV_PREFIX + name.upper()))
        registry_dir = environ.get(ENV_PREFIX + "PACKAGE_REGISTRY_DIR")
        if registry_dir:
            self.options.package_registry_dir = registry_dir

    def to_dict(self) -> Dict[str, dict]:
        data = {
            'stager': {'verbose': self.verbose},
            'package': {
                'name': self.package.name,
                'compatibility': self.package.compatibility,
            },
            'install': {
                'prefix': self.install.prefix,
                'destinations': self.install.destinations,
                'multi_config': self.install.multi_config,
                'variants': self.install.variants,
            },
            'options': {
                'install_package_config': self.options.install_package_config,
                'register_package': self.options.register_package,
                'package_registry_dir': self.options.package_registry_dir,
            },
        }
        # TOML has no null
        optional = {
            'package': ('version', 'namespace', 'config_template', 'qt_version_major'),
            'install': ('linux_shared_destination', 'bundle_dir', 'dest_folder'),
        }
        for section, keys in optional.items():
            settings = getattr(self, section)
            for key in keys:
                value = getattr(settings, key)
                if value is not None:
                    data[section][key] = value
        return data

    def save(self, config_path: Path) -> Path:
        """Save configuration to file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            toml.dump(self.to_dict(), f)
        return config_path


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name}: expected a boolean, got '{raw}'")


# Global configuration instance
_global_config = None


def get_config() -> StagerConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = StagerConfig.load()
    return _global_config


def set_config(config: Optional[StagerConfig]) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config
