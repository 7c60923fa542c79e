"""
Artifact installer.

Installs shared libraries, plain files and public header trees into the
destinations resolved for the current platform and build variants.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import UsageError
from .context import ConfigurationPass
from .destinations import Destination, DestinationLike, as_destinations, normalize_path
from .manifest import Component, InstallRecord
from .platform import PlatformKind
from .targets import Target

HEADER_PATTERNS = ("*.h", "*.hpp", "*.hxx", "*.inl")
PRIVATE_HEADER_DIRS = ("private", "internal")

PathLike = Union[str, Path]


@dataclass
class SharedArtifactRequest:
    """Arguments of install_shared_artifact."""
    target: Target
    destinations: Optional[Sequence[DestinationLike]] = None  # defaults to install.destinations
    export: bool = False
    headers: List[PathLike] = field(default_factory=list)
    headers_dir: Optional[PathLike] = None
    headers_dest: Optional[str] = None  # sub directory below the include root


@dataclass
class FilesRequest:
    """Arguments of install_files."""
    files: List[PathLike] = field(default_factory=list)
    destinations: Optional[Sequence[DestinationLike]] = None


@dataclass
class HeaderRequest:
    """Arguments of install_headers."""
    target: Optional[str] = None
    headers: List[PathLike] = field(default_factory=list)
    headers_dir: Optional[PathLike] = None
    destination: Optional[str] = None
    component: Component = Component.DEVELOPMENT
    excluded_dirs: Sequence[str] = ()


class ArtifactInstaller:
    """Installs build outputs for one configuration pass."""

    def __init__(self, context: ConfigurationPass):
        self.context = context

    def _destinations(self, requested: Optional[Sequence[DestinationLike]], operation: str) -> List[Destination]:
        if requested is None:
            requested = self.context.config.install.destinations
        destinations = as_destinations(requested)
        if not destinations or any(not d.base for d in destinations):
            raise UsageError(f"{operation}: no install destination specified")
        return destinations

    def install_shared_artifact(self, request: SharedArtifactRequest) -> List[InstallRecord]:
        """
        Install a shared library target and optionally export it.

        Args:
            request: Target, destinations, export flag and headers to install

        Returns:
            Install records of every file placed
        """
        ctx = self.context
        target = request.target
        destinations = self._destinations(request.destinations, "install_shared_artifact")
        ctx.diagnostics.status(f"Install shared library: {target.name}")

        if request.export:
            if ctx.finalized:
                ctx.diagnostics.warning(
                    f"{target.name} exported after the package config was generated; "
                    f"it is missing from {ctx.package_name}Targets"
                )
            if ctx.registry.register(target.name):
                ctx.diagnostics.status(f"  -> Added to {ctx.package_name}Targets export")

        linux_destination = ctx.config.install.linux_shared_destination
        if ctx.profile.kind is PlatformKind.LINUX and linux_destination:
            destinations = [Destination(linux_destination)]

        records = []
        for destination in destinations:
            records.extend(self.install_target(target, destination))

        if request.export and ctx.registry.is_enabled() and ctx.profile.uses_namelinks:
            build_include = ctx.resolve_source(request.headers_dir) if request.headers_dir else None
            ctx.interface_includes[target.name] = (build_include, normalize_path(ctx.include_root, target.name))

        if request.headers or request.headers_dir:
            records.extend(self.install_headers(HeaderRequest(
                target=target.name,
                headers=request.headers,
                headers_dir=request.headers_dir,
                destination=normalize_path(ctx.include_root, request.headers_dest or target.name),
                excluded_dirs=PRIVATE_HEADER_DIRS,
            )))
        return records

    def install_target(self, target: Target, destination: Destination) -> List[InstallRecord]:
        """Copy the runtime, library and archive outputs of a target to one destination."""
        ctx = self.context
        records = []
        for variant in ctx.install_variants:
            path = destination.resolve(variant, ctx.profile)
            outputs = target.outputs_for(variant)
            if outputs.is_empty():
                raise FileNotFoundError(f"{target.name} has no build outputs for {variant.value}")
            ctx.diagnostics.status(f"  {target.name} [{variant.value}] -> {path}")

            if ctx.profile.kind is PlatformKind.WINDOWS:
                roles = (
                    ("runtime", outputs.runtime, Component.RUNTIME),
                    ("library", outputs.library, Component.RUNTIME),
                    ("archive", outputs.archive, Component.DEVELOPMENT),
                )
            else:
                roles = (
                    ("library", outputs.library, Component.RUNTIME),
                    ("namelink", outputs.namelink, Component.DEVELOPMENT),
                    ("archive", outputs.archive, Component.DEVELOPMENT),
                    ("runtime", outputs.runtime, Component.RUNTIME),
                )

            seen = set()
            for role, source, component in roles:
                if source is None:
                    continue
                source = ctx.resolve_output(source)
                if source in seen:
                    continue
                seen.add(source)
                records.append(ctx.manifest.install_file(
                    source, path, component, variant=variant, target=target.name, role=role,
                ))
        return records

    def install_files(self, request: FilesRequest) -> List[InstallRecord]:
        """Install plain files to every configured destination."""
        ctx = self.context
        if not request.files:
            ctx.diagnostics.warning("install_files: no files specified")
            return []

        destinations = self._destinations(request.destinations, "install_files")
        names = ", ".join(str(f) for f in request.files)
        ctx.diagnostics.status(f"Install files: {names} to {', '.join(str(d) for d in destinations)}")

        records = []
        for destination in destinations:
            records.extend(self.copy_files(request.files, destination))
        return records

    def copy_files(self, files: Sequence[PathLike], destination: Destination,
                   target: Optional[str] = None, role: str = "file") -> List[InstallRecord]:
        """Copy files to one destination, once per install variant."""
        ctx = self.context
        records = []
        for variant in ctx.install_variants:
            path = destination.resolve(variant, ctx.profile)
            ctx.diagnostics.status(f"  {len(files)} file(s) [{variant.value}] -> {path}")
            for source in files:
                records.append(ctx.manifest.install_file(
                    ctx.resolve_source(source), path, Component.RUNTIME,
                    variant=variant, target=target, role=role,
                ))
        return records

    def install_headers(self, request: HeaderRequest) -> List[InstallRecord]:
        """
        Install public headers of a library.

        Individual headers are copied as given; a header directory is copied
        recursively, keeping only header files and skipping excluded sub trees.
        """
        ctx = self.context
        if request.destination:
            destination = request.destination
        elif request.target:
            destination = normalize_path(ctx.include_root, request.target)
        else:
            destination = ctx.include_root

        records = []
        if request.headers:
            for header in request.headers:
                records.append(ctx.manifest.install_file(
                    ctx.resolve_source(header), destination, request.component,
                    target=request.target, role="header",
                ))
            ctx.diagnostics.status(f"Install headers for {request.target}: {destination}")

        if request.headers_dir:
            headers_dir = ctx.resolve_source(request.headers_dir)
            if headers_dir.is_dir():
                records.extend(ctx.manifest.install_tree(
                    headers_dir, destination, request.component,
                    patterns=HEADER_PATTERNS, excluded_dirs=request.excluded_dirs,
                    target=request.target, role="header",
                ))
                ctx.diagnostics.status(
                    f"Install headers directory for {request.target}: {headers_dir} -> {destination}"
                )
            else:
                logging.debug(f"Header directory {headers_dir} does not exist, skipping")
        return records
