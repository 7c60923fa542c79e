"""Status and warning lines emitted while a pass runs."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..errors import ConfigurationWarning


@dataclass
class Diagnostic:
    level: str  # "status" or "warning"
    message: str


class Diagnostics:
    """
    Collects the trace of one configuration pass.

    Every line is kept in order, forwarded to logging, and optionally echoed
    through a callback (the CLI uses this to print styled output).
    """

    def __init__(self, echo: Optional[Callable[[Diagnostic], None]] = None):
        self.messages: List[Diagnostic] = []
        self.warnings: List[ConfigurationWarning] = []
        self.echo = echo

    def status(self, message: str):
        self._emit(Diagnostic("status", message))
        logging.info(message)

    def warning(self, message: str) -> ConfigurationWarning:
        self._emit(Diagnostic("warning", message))
        logging.warning(message)
        warning = ConfigurationWarning(message)
        self.warnings.append(warning)
        return warning

    def _emit(self, diagnostic: Diagnostic):
        self.messages.append(diagnostic)
        if self.echo is not None:
            self.echo(diagnostic)

    def lines(self, level: Optional[str] = None) -> List[str]:
        return [d.message for d in self.messages if level is None or d.level == level]
