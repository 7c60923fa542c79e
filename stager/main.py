#!/usr/bin/env python3
"""
Stager - build artifact installation CLI

This is the main entry point for the stager command.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .config import StagerConfig, set_config
from .errors import StagerError
from .install import (
    BuildDescription,
    BuildVariant,
    Component,
    ConfigurationPass,
    Diagnostics,
    PlatformProfile,
    parse_version,
    resolve,
)
from .install.diagnostics import Diagnostic
from .modules.cli_parser import create_main_parser
from .modules.utils import print_error, print_info, print_success, print_warning


def echo_diagnostic(diagnostic: Diagnostic):
    if diagnostic.level == "warning":
        print_warning(diagnostic.message)
    else:
        print_info(diagnostic.message)


def _profile(args, config: Optional[StagerConfig] = None) -> PlatformProfile:
    multi_config = args.multi_config or (config.install.multi_config if config else False)
    if args.platform:
        return PlatformProfile.for_name(args.platform, multi_config=multi_config)
    return PlatformProfile.detect(multi_config=multi_config)


def handle_install(args) -> int:
    config = StagerConfig.load(Path(args.config) if args.config else None)
    if args.verbose:
        config.verbose = True
    set_config(config)

    context = ConfigurationPass(
        config=config,
        profile=_profile(args, config),
        prefix=args.prefix,
        build_dir=args.build_dir,
        source_dir=args.source_dir,
        variants=[BuildVariant.parse(v) for v in args.variant] if args.variant else None,
        components=[Component(c) for c in args.component] if args.component else None,
        dry_run=args.dry_run,
        diagnostics=Diagnostics(echo=echo_diagnostic),
    )

    description = BuildDescription.load(args.description)
    result = description.run(context)

    if args.manifest:
        path = context.manifest.save(args.manifest, dependencies=context.dependencies)
        print_info(f"Install log written to {path}")

    copied = sum(1 for record in result.records if record.copied)
    print_success(f"Ran {result.steps_run} step(s), installed {copied} of {len(result.records)} file(s)")
    for name, dependencies in context.dependencies.items():
        print_info(f"{name} is built after: {', '.join(dependencies)}")
    if context.diagnostics.warnings:
        print_warning(f"{len(context.diagnostics.warnings)} warning(s)")
    return 0


def handle_resolve(args) -> int:
    profile = _profile(args)
    print(resolve(args.base, args.subfolder, BuildVariant.parse(args.variant), profile))
    return 0


def handle_version(args) -> int:
    info = parse_version(args.version)
    if not info.matched:
        print_warning(f"'{info.version}' does not match MAJOR.MINOR[.PATCH]")
    print(f"major={info.major} minor={info.minor} patch={info.patch}")
    return 0 if info.matched else 1


HANDLERS = {
    'install': handle_install,
    'i': handle_install,
    'resolve': handle_resolve,
    'r': handle_resolve,
    'version': handle_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the stager CLI."""
    parser = create_main_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        return HANDLERS[args.command](args)
    except (StagerError, OSError, ValueError) as e:
        print_error(f"Error: {e}")
        return 1
