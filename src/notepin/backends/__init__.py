"""Handles storing serialized data under string keys.

:class:`notepin.backends.base.Backend` defines an API.
:class:`notepin.backends.memory.MemoryBackend` keeps everything in a dict, which is mostly useful for tests, while
:class:`notepin.backends.file.FileBackend` and :class:`notepin.backends.sqlite.SqliteBackend` persist data across runs.
"""
