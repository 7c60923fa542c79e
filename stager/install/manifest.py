"""
Install manifest.

Wraps the file-copy primitive and records every installed file:
- Copies sources into prefix-relative destination directories
- Preserves symlinks (shared-object name links)
- Honours component filtering and dry runs
- Saves the install log as JSON
"""

import fnmatch
import json
import logging
import os
import shutil
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .destinations import normalize_path
from .platform import BuildVariant


class Component(str, Enum):
    RUNTIME = "Runtime"
    DEVELOPMENT = "Development"


@dataclass
class InstallRecord:
    """One file placed (or planned) under the install prefix."""
    source: Path
    destination: str  # install path of the file, relative to the prefix unless absolute
    component: Component
    variant: BuildVariant = BuildVariant.DEFAULT
    target: Optional[str] = None
    role: Optional[str] = None  # runtime, library, namelink, archive, header, file, config
    copied: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": str(self.source),
            "destination": self.destination,
            "component": self.component.value,
            "variant": self.variant.value,
            "target": self.target,
            "role": self.role,
            "copied": self.copied,
        }


class InstallManifest:
    """Copies files under an install prefix and keeps the install log."""

    def __init__(self, prefix: Union[str, Path], components: Optional[Iterable[Component]] = None,
                 dry_run: bool = False):
        self.prefix = Path(prefix)
        self.components = set(components) if components else None
        self.dry_run = dry_run
        self.records: List[InstallRecord] = []

    def absolute(self, destination: str) -> Path:
        """Map a prefix-relative destination onto the filesystem."""
        path = Path(destination)
        if path.is_absolute():
            return path
        return self.prefix / path

    def selected(self, component: Component) -> bool:
        return self.components is None or component in self.components

    def install_file(self, source: Union[str, Path], destination_dir: str, component: Component,
                     variant: BuildVariant = BuildVariant.DEFAULT, target: Optional[str] = None,
                     role: Optional[str] = None, rename: Optional[str] = None) -> InstallRecord:
        """
        Install one file into a destination directory.

        Args:
            source: File to copy; symlinks are copied as symlinks
            destination_dir: Directory relative to the prefix (or absolute)
            component: Install component the file belongs to
            variant: Build variant the destination was resolved for
            target: Owning target name, if any
            role: Artifact role of the file
            rename: Installed file name, defaults to the source name

        Returns:
            The InstallRecord describing the file
        """
        source = Path(source)
        destination = normalize_path(destination_dir, rename or source.name)
        record = InstallRecord(source=source, destination=destination, component=component,
                               variant=variant, target=target, role=role)

        if self.selected(component) and not self.dry_run:
            self._copy(source, self.absolute(destination))
            record.copied = True
        else:
            logging.debug(f"Skipping copy of {source} ({component.value})")

        self.records.append(record)
        return record

    def install_tree(self, source_dir: Union[str, Path], destination_dir: str, component: Component,
                     patterns: Sequence[str] = ("*",), excluded_dirs: Sequence[str] = (),
                     variant: BuildVariant = BuildVariant.DEFAULT,
                     target: Optional[str] = None, role: Optional[str] = None) -> List[InstallRecord]:
        """Install matching files of a directory tree, keeping its relative layout."""
        source_dir = Path(source_dir)
        installed = []
        for root, dirs, files in os.walk(source_dir):
            dirs[:] = sorted(d for d in dirs if d not in excluded_dirs)
            relative = Path(root).relative_to(source_dir).as_posix()
            for name in sorted(files):
                if not any(fnmatch.fnmatch(name, pattern) for pattern in patterns):
                    continue
                installed.append(self.install_file(
                    Path(root) / name,
                    normalize_path(destination_dir, relative if relative != "." else ""),
                    component, variant=variant, target=target, role=role,
                ))
        return installed

    def _copy(self, source: Path, destination: Path):
        destination.parent.mkdir(parents=True, exist_ok=True)
        # Last writer wins
        if destination.is_symlink() or (source.is_symlink() and destination.exists()):
            destination.unlink()
        shutil.copy2(source, destination, follow_symlinks=False)

    def records_for(self, target: str, roles: Optional[Iterable[str]] = None) -> List[InstallRecord]:
        roles = set(roles) if roles is not None else None
        return [r for r in self.records
                if r.target == target and (roles is None or r.role in roles)]

    def save(self, filepath: Union[str, Path], dependencies: Optional[Dict[str, List[str]]] = None) -> Path:
        """Write the install log as JSON, with the build-order dependencies of the pass."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": "1.0",
            "prefix": str(self.prefix),
            "written_at": time.time(),
            "dry_run": self.dry_run,
            "records": [record.to_dict() for record in self.records],
            "dependencies": {name: list(deps) for name, deps in (dependencies or {}).items()},
        }
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        return path
