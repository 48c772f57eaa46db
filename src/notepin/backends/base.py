"""Defines the API for the key-value storage that a note collection lives in.

The most important class is :class:`Backend`.
"""

from typing import Optional


class Backend:
    """Base class for backends, which store one string value per key.

    Reads and writes are synchronous. A backend makes no transactional promises beyond "last write wins", and
    is assumed to be used by a single client at a time.
    """
    def get(self, key: str) -> Optional[str]:
        """Returns the value most recently stored under the key, or None if nothing has been stored."""
        raise NotImplementedError()

    def set(self, key: str, value: str) -> None:
        """Stores the value under the key, replacing any previous value as a whole."""
        raise NotImplementedError()

    def close(self) -> None:
        """Release any resources associated with the backend. Should be called when you're done with an instance."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
