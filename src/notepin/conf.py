from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
import random
from typing import Callable


_ID_LIMIT = 2 ** 53


def random_id() -> int:
    """Returns a random id in the range ``[1, 2**53)``.

    The upper bound keeps ids exactly representable in JSON readers that parse numbers as doubles.
    The space is large enough that collisions are very unlikely, but :class:`notepin.store.NoteStore` still
    checks every new id against the existing ones.
    """
    return random.randrange(1, _ID_LIMIT)


@dataclass
class BackendConf:
    """Base class for backend config. Use a subclass such as :class:`SqliteBackendConf`."""

    def instantiate(self):
        raise NotImplementedError("Please use a subclass like SqliteBackendConf instead!")

    def standardize(self):
        return self


@dataclass
class MemoryBackendConf(BackendConf):
    """Configures notepin to keep notes in memory only, via :class:`notepin.backends.memory.MemoryBackend`.

    Nothing is saved when the process exits, so this is mainly useful for tests.
    """
    def instantiate(self):
        from notepin.backends.memory import MemoryBackend
        return MemoryBackend()


@dataclass
class FileBackendConf(BackendConf):
    """Configures notepin to store data as files in a folder, via :class:`notepin.backends.file.FileBackend`."""

    path: str = None
    """Required. Folder in which one file per storage key is kept.

    The folder will be created if it does not exist."""

    def instantiate(self):
        from notepin.backends.file import FileBackend
        return FileBackend(self.standardize())

    def standardize(self):
        if not self.path:
            return self
        return replace(self, path=os.path.realpath(os.path.expanduser(self.path)))


@dataclass
class SqliteBackendConf(BackendConf):
    """Configures notepin to store data in a SQLite database, via :class:`notepin.backends.sqlite.SqliteBackend`."""

    cache_path: str = None
    """Required. Path where the SQLite database file should be stored.

    The file will be created if it does not exist. Unlike a cache, this file holds your notes, so don't delete it
    unless you've exported them first."""

    def instantiate(self):
        from notepin.backends.sqlite import SqliteBackend
        return SqliteBackend(self.standardize())

    def standardize(self):
        if not self.cache_path or self.cache_path == ':memory:':
            return self
        return replace(self, cache_path=os.path.realpath(os.path.expanduser(self.cache_path)))


@dataclass
class NotepinConf:
    backend_conf: BackendConf
    """Configures where your notes are stored."""

    storage_key: str = 'notes'
    """The key under which the whole note collection is stored in the backend."""

    export_filename: str = 'export.csv'
    """Default filename used by the ``export`` command and :meth:`notepin.api.Notepin.export_to`."""

    id_generator: Callable[[], int] = random_id
    """Returns candidate ids for new notes.

    Candidates that are already in use are discarded and the function is called again, so it must not keep
    returning the same value. For example, to number notes sequentially:

    .. code-block:: python

       import itertools
       conf.id_generator = itertools.count(1).__next__
    """

    preview_mode: bool = False
    """If True, commands that would change notes should instead just print a list of changes to the console.

    Instead of setting this in your ``.notepin.conf.py``, you can pass a ``--preview`` command-line argument to
    relevant commands.
    """

    @classmethod
    def user_config_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.notepin.conf.py'))

    @classmethod
    def for_user(cls) -> NotepinConf:
        path = cls.user_config_path()
        if not os.path.exists(path):
            raise Exception(f'You need to create the config file: {path}')
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of NotepinConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self):
        return replace(
            self,
            backend_conf=self.backend_conf.standardize()
        )

    def instantiate(self):
        from notepin.api import Notepin
        return Notepin(self.standardize())
