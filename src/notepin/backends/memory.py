"""Provides the :class:`MemoryBackend` class."""

from typing import Dict, Optional

from notepin.backends.base import Backend


class MemoryBackend(Backend):
    """Keeps values in a dict. Nothing survives the process.

    .. attribute:: values
       :type: Dict[str, str]
    """
    def __init__(self, values: Dict[str, str] = None):
        self.values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
