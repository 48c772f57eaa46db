"""Provides the main entry point for using the library, :class:`Notepin`"""

from __future__ import annotations
import logging
import os.path
from typing import Optional, Set

import shortuuid

from notepin.conf import NotepinConf
from notepin.store import NoteStore


logger = logging.getLogger(__name__)


def find_available_name(dest: str, unavailable: Set[str] = frozenset()) -> str:
    """Returns dest, or a variation of it, that does not exist and is not in unavailable.

    The variation is made by inserting an underscore and a shortened UUID before the file extension,
    for example ``export_3k4ZjFm2uT6Y6ZcX9dR5sB.csv``.
    """
    candidate = dest
    base, suffix = os.path.splitext(dest)
    while os.path.exists(candidate) or candidate in unavailable:
        candidate = f'{base}_{shortuuid.uuid()}{suffix}'
    return candidate


class Notepin:
    """Main entry point for working programmatically with your notes.

    Generally, you should get an instance using the :meth:`Notepin.for_user` method. Call :meth:`close` when you're
    done with it, or else use it as a context manager.

    .. attribute:: conf
       :type: notepin.conf.NotepinConf

       Typically loaded from the variable ``conf`` in the file ``~/.notepin.conf.py``

    .. attribute:: backend
       :type: notepin.backends.base.Backend

    .. attribute:: store
       :type: notepin.store.NoteStore

       Provides the note operations themselves (create, list, search, etc).

    Here's an example of how to use this class. This would pin every note mentioning "urgent".

    .. code-block:: python

       from notepin.api import Notepin
       with Notepin.for_user() as np:
           for note in np.store.search('urgent'):
               if not note.fixed:
                   np.store.toggle_pin(note.id)
    """

    @staticmethod
    def for_user() -> Notepin:
        """Creates an instance using the user's ``~/.notepin.conf.py`` file.

        Raises :exc:`Exception` if it does not exist or does not define configuration.
        """
        return NotepinConf.for_user().instantiate()

    def __init__(self, conf: NotepinConf):
        self.conf = conf
        self.backend = conf.backend_conf.instantiate()
        self.store = NoteStore(self.backend, key=conf.storage_key, id_generator=conf.id_generator,
                               preview_mode=conf.preview_mode)

    def export_to(self, dest: Optional[str] = None, *, check_exists=True) -> str:
        """Writes the output of :meth:`notepin.store.NoteStore.export` to a file.

        If dest is not given, :attr:`notepin.conf.NotepinConf.export_filename` is used.

        This method tries not to overwrite files; if the destination already exists, a shortened UUID
        will be appended to the filename. You can disable that behavior by setting check_exists=False.

        In preview mode, the destination is printed and nothing is written.

        Returns the path of the written file.
        """
        dest = os.path.realpath(dest or self.conf.export_filename)
        if check_exists:
            dest = find_available_name(dest)
        text = self.store.export()
        if self.store.preview_mode:
            print(f'Would export {len(self.store.raw())} notes to {dest}')
            return dest
        with open(dest, 'w', encoding='utf-8') as file:
            file.write(text)
        logger.debug('Exported notes to %s', dest)
        return dest

    def close(self):
        """Closes the associated backend and releases any other resources."""
        self.backend.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
