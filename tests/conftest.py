import os
from pathlib import Path

import pytest

from stager.config import StagerConfig
from stager.install import (
    BuildVariant,
    ConfigurationPass,
    PlatformKind,
    PlatformProfile,
    Target,
    TargetKind,
    TargetOutputs,
)


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def build_dir(tmp_path):
    """A build tree holding the outputs of one shared library."""
    build = tmp_path / "build"
    lib = build / "lib"
    write_file(lib / "libCoreLib.so.2.13", "ELF")
    write_file(lib / "libCoreLib.a", "ARCHIVE")
    os.symlink("libCoreLib.so.2.13", lib / "libCoreLib.so")
    return build


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "src"
    source.mkdir()
    return source


@pytest.fixture
def core_lib():
    return Target(
        name="CoreLib",
        kind=TargetKind.LIBRARY,
        outputs={
            BuildVariant.DEFAULT: TargetOutputs(
                library=Path("lib/libCoreLib.so.2.13"),
                namelink=Path("lib/libCoreLib.so"),
                archive=Path("lib/libCoreLib.a"),
            ),
        },
    )


@pytest.fixture
def make_pass(tmp_path, build_dir, source_dir):
    """Factory for a ConfigurationPass rooted in tmp_path."""

    def _make(kind=PlatformKind.LINUX, multi_config=False, config=None, **kwargs):
        if config is None:
            config = StagerConfig()
            config.package.name = "CloudCompare"
            config.install.destinations = ["lib"]
            config.options.package_registry_dir = str(tmp_path / "registry")
        kwargs.setdefault("prefix", tmp_path / "prefix")
        kwargs.setdefault("build_dir", build_dir)
        kwargs.setdefault("source_dir", source_dir)
        return ConfigurationPass(
            config=config,
            profile=PlatformProfile(kind=kind, multi_config=multi_config),
            **kwargs,
        )

    return _make
