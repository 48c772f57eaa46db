"""Provides the :class:`FileBackend` class."""

import logging
import os
import os.path
from tempfile import mkstemp
from typing import Optional
from urllib.parse import quote

from notepin.backends.base import Backend
from notepin.conf import FileBackendConf


logger = logging.getLogger(__name__)


class FileBackend(Backend):
    """Stores each key as a separate file in a directory.

    Keys are percent-encoded to build the filename, so any string can be used as a key. Each value is
    written to a temporary file in the same directory which is then renamed over the old file, so a crash
    mid-write leaves the previous value intact.

    The directory is created when the first value is written.

    .. attribute:: conf
       :type: notepin.conf.FileBackendConf
    """
    def __init__(self, conf: FileBackendConf):
        if not conf.path:
            raise ValueError('`path` must be set in FileBackendConf.')
        self.conf = conf

    def _key_path(self, key: str) -> str:
        return os.path.join(self.conf.path, quote(key, safe='') + '.json')

    def get(self, key: str) -> Optional[str]:
        path = self._key_path(key)
        if not os.path.isfile(path):
            return None
        with open(path, 'r', encoding='utf-8') as file:
            return file.read()

    def set(self, key: str, value: str) -> None:
        path = self._key_path(key)
        os.makedirs(self.conf.path, exist_ok=True)
        fd, tmp = mkstemp(prefix='.' + os.path.basename(path), dir=self.conf.path)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as file:
                file.write(value)
            os.replace(tmp, path)
        except BaseException:
            os.remove(tmp)
            raise
        logger.debug('Wrote %d characters to %s', len(value), path)
