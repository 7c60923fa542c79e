"""
CLI argument parsing for Stager.
"""
import argparse

import pyfiglet

from .utils import Colors, styled_print, print_subheader
from .. import __version__

PLATFORM_CHOICES = ("linux", "macos", "windows")
VARIANT_CHOICES = ("Default", "Debug", "Release", "RelWithDebInfo")
COMPONENT_CHOICES = ("Runtime", "Development")


class StyledArgumentParser(argparse.ArgumentParser):
    """Custom ArgumentParser that provides styled help output."""

    def __init__(self, *args, show_banner=False, **kwargs):
        """Initialize with optional banner flag."""
        super().__init__(*args, **kwargs)
        self.show_banner = show_banner

    def print_help(self, file=None):
        """Override print_help to use our styled formatter."""
        # Only show banner for main parser
        if self.show_banner:
            ascii_art = pyfiglet.figlet_format("STAGER", font="letters")
            for line in ascii_art.split('\n'):
                if line.strip():
                    styled_print(line, Colors.BRIGHT_CYAN, Colors.BOLD, 0)
            print()
            print_subheader("COMMAND OPTIONS")

        for line in self.format_help().split('\n'):
            if not line.strip():
                continue
            elif line.startswith('usage:'):
                styled_print(line, Colors.BRIGHT_YELLOW, Colors.BOLD, 0)
            elif line.startswith('options:') or line.startswith('positional arguments:'):
                styled_print(line, Colors.BRIGHT_CYAN, Colors.BOLD, 0)
            elif line.startswith('  -') or line.startswith('    -'):
                styled_print(line, Colors.BRIGHT_YELLOW, None, 0)
            else:
                styled_print(line, Colors.BRIGHT_GREEN, None, 0)

        if self.show_banner:
            print()
            styled_print(f" stager v{__version__} ", Colors.BRIGHT_MAGENTA, None, 0)


def create_main_parser(show_banner: bool = True) -> argparse.ArgumentParser:
    """Create the main argument parser for Stager."""
    parser = StyledArgumentParser(
        prog="stager",
        description="Stager - install built artifacts and generate CMake package configs",
        formatter_class=argparse.RawTextHelpFormatter,
        show_banner=show_banner,
        allow_abbrev=False,
    )
    parser.add_argument('--version', action='version', version=f'stager {__version__}',
                        help='Show version information')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    install = subparsers.add_parser('install', aliases=['i'],
                                    help='Run the install steps of a build description')
    install.add_argument('description', help='Build description (TOML)')
    install.add_argument('-c', '--config', help='Stager config file (default: stager.toml)')
    install.add_argument('--prefix', help='Install prefix (overrides install.prefix)')
    install.add_argument('--build-dir', default='.', help='Directory holding the build outputs')
    install.add_argument('--source-dir', default='.', help='Directory holding headers, shaders and templates')
    _add_platform_arguments(install)
    install.add_argument('--variant', action='append', choices=VARIANT_CHOICES,
                         help='Build variant to install (repeatable, multi-config only)')
    install.add_argument('--component', action='append', choices=COMPONENT_CHOICES,
                         help='Only copy files of this component (repeatable)')
    install.add_argument('--dry-run', action='store_true', help='Record the install without copying')
    install.add_argument('--manifest', help='Write the install log to this JSON file')

    resolve = subparsers.add_parser('resolve', aliases=['r'],
                                    help='Print the destination a build variant installs to')
    resolve.add_argument('base', help='Destination base path')
    resolve.add_argument('subfolder', nargs='?', default='', help='Folder below the base')
    resolve.add_argument('--variant', default='Default', choices=VARIANT_CHOICES)
    _add_platform_arguments(resolve)

    version = subparsers.add_parser('version', help='Parse a package version string')
    version.add_argument('version', help='Version, e.g. 2.13.0')

    return parser


def _add_platform_arguments(parser):
    parser.add_argument('--platform', choices=PLATFORM_CHOICES,
                        help='Target platform (default: host)')
    parser.add_argument('--multi-config', action='store_true',
                        help='Multi-configuration generator (per-variant trees on Windows)')
