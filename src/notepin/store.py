"""Provides :class:`NoteStore`, which owns the lifecycle, ordering, search, and export of notes."""

import json
import logging
from typing import Callable, List, Optional

from notepin.backends.base import Backend
from notepin.conf import random_id
from notepin.models import Note, NoteEditCmd, CreateCmd, UpdateCmd, DeleteCmd, TogglePinCmd, DuplicateCmd,\
    NoteQuery, NoteQueryIsh


logger = logging.getLogger(__name__)


EXPORT_HEADER = ('ID', 'Content', 'Fixed?')


class Error(Exception):
    pass


class NotFoundError(Error):
    """Raised when an operation refers to a note id that is not in the collection."""
    def __init__(self, note_id: int):
        super().__init__(f'No note with id {note_id}')
        self.note_id = note_id


class DuplicateIdError(Error):
    """Raised when a command would store a second note with an id that is already in use."""
    def __init__(self, note_id: int):
        super().__init__(f'A note with id {note_id} already exists')
        self.note_id = note_id


def parse_notes(serialized: str) -> List[Note]:
    """Deserializes a note collection as written by :func:`serialize_notes`.

    Raises :exc:`ValueError` if the data is not valid json or not an array of note records.
    """
    records = json.loads(serialized)
    if not isinstance(records, list):
        raise ValueError(f'Expected an array of notes, got {type(records).__name__}')
    return [Note.from_json(r) for r in records]


def serialize_notes(notes: List[Note]) -> str:
    return json.dumps([n.as_json() for n in notes])


def _export_field(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def export_rows(notes: List[Note]) -> str:
    """Formats notes as comma-separated rows, preceded by a header row.

    Fields are not quoted or escaped, so content containing commas or newlines will not survive
    a round trip through a CSV reader.
    """
    rows = [EXPORT_HEADER] + [(n.id, n.content, n.fixed) for n in notes]
    return '\n'.join(','.join(_export_field(f) for f in row) for row in rows)


def _find(notes: List[Note], note_id: int) -> Note:
    for note in notes:
        if note.id == note_id:
            return note
    raise NotFoundError(note_id)


class NoteStore:
    """Reads, queries, and changes a collection of notes kept in a :class:`notepin.backends.base.Backend`.

    Every operation reads the whole collection from the backend, and every mutating operation writes the
    whole collection back before returning. Nothing is cached between operations.

    .. attribute:: backend
       :type: notepin.backends.base.Backend

    .. attribute:: key
       :type: str

       The backend key under which the collection is stored.

    .. attribute:: id_generator
       :type: Callable[[], int]

    .. attribute:: preview_mode
       :type: bool

       If True, :meth:`change` checks the edits against the stored notes and prints them instead of saving.
    """
    def __init__(self, backend: Backend, key: str = 'notes', id_generator: Callable[[], int] = random_id,
                 preview_mode: bool = False):
        self.backend = backend
        self.key = key
        self.id_generator = id_generator
        self.preview_mode = preview_mode

    def _load(self) -> List[Note]:
        try:
            serialized = self.backend.get(self.key)
            if not serialized:
                return []
            notes = parse_notes(serialized)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors; deeply nested arrays exhaust the stack
            logger.warning('Ignoring unreadable note data under key %r: %s', self.key, e)
            return []
        seen = set()
        unique = []
        for note in notes:
            if note.id in seen:
                logger.warning('Ignoring note with repeated id %s under key %r', note.id, self.key)
                continue
            seen.add(note.id)
            unique.append(note)
        return unique

    def _save(self, notes: List[Note]) -> None:
        self.backend.set(self.key, serialize_notes(notes))

    def new_id(self, notes: Optional[List[Note]] = None) -> int:
        """Returns an id from :attr:`id_generator` that is not used by any of the given notes.

        If notes is None, the stored collection is checked.
        """
        if notes is None:
            notes = self._load()
        used = {n.id for n in notes}
        while True:
            candidate = self.id_generator()
            if candidate not in used:
                return candidate
            logger.debug('Discarding id %s because it is already in use', candidate)

    def raw(self) -> List[Note]:
        """Returns all notes in storage order, which is creation order unless the data was edited externally."""
        return self._load()

    def list(self) -> List[Note]:
        """Returns all notes, with pinned notes first.

        Notes with the same pinned state are in creation order. Missing or corrupt data yields an empty list.
        """
        return self.query()

    def query(self, query: NoteQueryIsh = NoteQuery()) -> List[Note]:
        """Returns the notes matching the given query, with pinned notes first."""
        query = NoteQuery.parse(query)
        return query.apply_sorting(query.apply_filtering(self._load()))

    def search(self, term: str) -> List[Note]:
        """Returns notes whose content contains term (case-sensitive), with pinned notes first.

        An empty term matches every note, so the result is the same as :meth:`list`.
        """
        return self.query(NoteQuery(term))

    def get(self, note_id: int) -> Note:
        """Returns the note with the given id, or raises :exc:`NotFoundError`."""
        return _find(self._load(), note_id)

    def change(self, edits: List[NoteEditCmd]) -> None:
        """Applies the specified edits and saves the collection. Changes are applied in order.

        All edits are applied to a single copy of the collection, which is written back once at the end.
        If any edit fails, for example with :exc:`NotFoundError`, nothing is written.

        In preview mode the edits are still checked, so a missing id raises the same errors, but they are
        printed instead of saved.
        """
        notes = self._load()
        for edit in edits:
            self._apply(notes, edit)
        if self.preview_mode:
            for edit in edits:
                print(edit)
            return
        self._save(notes)

    def _apply(self, notes: List[Note], edit: NoteEditCmd) -> None:
        logger.debug('Applying %s', edit)
        if isinstance(edit, CreateCmd):
            if any(n.id == edit.note_id for n in notes):
                raise DuplicateIdError(edit.note_id)
            notes.append(Note(edit.note_id, edit.content))
        elif isinstance(edit, UpdateCmd):
            _find(notes, edit.note_id).content = edit.content
        elif isinstance(edit, DeleteCmd):
            notes[:] = [n for n in notes if not n.id == edit.note_id]
        elif isinstance(edit, TogglePinCmd):
            note = _find(notes, edit.note_id)
            note.fixed = not note.fixed
        elif isinstance(edit, DuplicateCmd):
            source = _find(notes, edit.note_id)
            if any(n.id == edit.new_id for n in notes):
                raise DuplicateIdError(edit.new_id)
            notes.append(Note(edit.new_id, source.content))
        else:
            raise ValueError(f'Unsupported edit: {edit}')

    def create(self, content: str = '') -> Note:
        """Appends a new unpinned note with a fresh id, and returns it."""
        note = Note(self.new_id(), content)
        self.change([CreateCmd(note.id, content)])
        return note

    def update(self, note_id: int, content: str) -> None:
        """Replaces the content of a note. Raises :exc:`NotFoundError` if there is no such note."""
        self.change([UpdateCmd(note_id, content)])

    def delete(self, note_id: int) -> None:
        """Removes a note. Does nothing if there is no such note."""
        self.change([DeleteCmd(note_id)])

    def toggle_pin(self, note_id: int) -> None:
        """Pins an unpinned note or unpins a pinned one. Raises :exc:`NotFoundError` if there is no such note."""
        self.change([TogglePinCmd(note_id)])

    def duplicate(self, note_id: int) -> Note:
        """Appends an unpinned copy of a note with a fresh id, and returns the copy.

        Raises :exc:`NotFoundError` if there is no such note.
        """
        source = self.get(note_id)
        copy = Note(self.new_id(), source.content)
        self.change([DuplicateCmd(note_id, copy.id)])
        return copy

    def export(self) -> str:
        """Returns all notes as comma-separated text, in storage order rather than pinned-first order.

        The first row is the header ``ID,Content,Fixed?``. See :func:`export_rows` for the format's limitations.
        """
        return export_rows(self._load())
