"""Export registry: the targets that go into the generated package targets file."""

import logging
from typing import Iterator, List, Tuple


class ExportRegistry:
    """
    Ordered, append-only list of exported target names.

    One registry lives for exactly one configuration pass. Names are never
    deduplicated here: registering a target twice records it twice.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled
        self._names: List[str] = []

    def is_enabled(self) -> bool:
        """Whether package config generation (and therefore export) is switched on."""
        return self._enabled

    def register(self, name: str) -> bool:
        """Append a target name. Returns False when export support is disabled."""
        if not self._enabled:
            logging.debug(f"Export disabled, not registering {name}")
            return False
        self._names.append(name)
        return True

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def __len__(self):
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __contains__(self, name) -> bool:
        return name in self._names
