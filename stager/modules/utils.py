"""
Utility functions for styled terminal output.
"""
import sys


class Colors:
    # Text colors
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'

    # Bright colors
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'

    # Formatting
    BOLD = '\033[1m'

    # Reset
    RESET = '\033[0m'


def styled_print(text, color=None, style=None, indent=0, file=None):
    """
    Print styled text with optional color, style, and indentation.

    Args:
        text (str): Text to print
        color (str): Color from Colors class
        style (str): Style from Colors class
        indent (int): Number of spaces to indent
        file: Stream to write to, defaults to stdout
    """
    stream = file or sys.stdout
    indent_str = " " * indent
    color_code = color or ""
    style_code = style or ""
    reset = Colors.RESET

    # Only apply colors if we're in a terminal that supports them
    if not (hasattr(stream, 'isatty') and stream.isatty()):
        color_code = style_code = reset = ""

    print(f"{indent_str}{color_code}{style_code}{text}{reset}", file=stream)


def print_subheader(text):
    """Print a styled subheader."""
    styled_print(f"\n{text}", Colors.CYAN, Colors.BOLD, 2)


def print_success(text, indent=0):
    """Print success message in green."""
    styled_print(text, Colors.GREEN, Colors.BOLD, indent)


def print_warning(text, indent=0):
    """Print warning message in yellow."""
    styled_print(text, Colors.YELLOW, Colors.BOLD, indent, file=sys.stderr)


def print_error(text, indent=0):
    """Print error message in red."""
    styled_print(text, Colors.RED, Colors.BOLD, indent, file=sys.stderr)


def print_info(text, indent=0):
    """Print info message in blue."""
    styled_print(text, Colors.BLUE, None, indent)
