"""Defines classes for representing notes, queries, and update requests.

The most important classes are :class:`Note`, :class:`NoteEditCmd`, and :class:`NoteQuery`
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union


@dataclass
class Note:
    """A single short text note.

    Instances are plain data; they know nothing about where they are stored or how they are displayed.
    """

    id: int
    """Identifier, unique among the notes currently stored in a collection."""

    content: str = ''
    """The text of the note. May be empty."""

    fixed: bool = False
    """True if the note is pinned, meaning it is listed before all unpinned notes."""

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'id': self.id,
            'content': self.content,
            'fixed': self.fixed
        }

    @classmethod
    def from_json(cls, record: dict) -> Note:
        """Builds an instance from a dict like the ones returned by :meth:`as_json`.

        Raises :exc:`ValueError` if the record does not have the expected shape.
        """
        if not isinstance(record, dict):
            raise ValueError(f'Note record must be an object: {record!r}')
        note_id = record.get('id')
        # bool is a subclass of int, but true/false are not valid ids
        if not isinstance(note_id, int) or isinstance(note_id, bool):
            raise ValueError(f'Note record has invalid id: {record!r}')
        content = record.get('content', '')
        if content is None:
            content = ''
        if not isinstance(content, str):
            raise ValueError(f'Note record has invalid content: {record!r}')
        fixed = record.get('fixed', False)
        if not isinstance(fixed, bool):
            raise ValueError(f'Note record has invalid fixed flag: {record!r}')
        return cls(note_id, content, fixed)


@dataclass
class NoteEditCmd:
    """Base class for requests to make changes to a note collection."""

    note_id: int
    """Id of the note that should be changed (or created)."""


@dataclass
class CreateCmd(NoteEditCmd):
    """Represents a request to append a new, unpinned note.

    The id must not already be in use.
    """

    content: str = ''


@dataclass
class UpdateCmd(NoteEditCmd):
    """Represents a request to replace a note's content. The pinned state is left alone."""

    content: str


@dataclass
class DeleteCmd(NoteEditCmd):
    """Represents a request to remove a note.

    If no note has the id, this request should be treated as a no-op.
    """


@dataclass
class TogglePinCmd(NoteEditCmd):
    """Represents a request to flip a note's :attr:`Note.fixed` attribute."""


@dataclass
class DuplicateCmd(NoteEditCmd):
    """Represents a request to append an unpinned copy of a note.

    Duplicates are never pinned, even if the original is.
    """

    new_id: int
    """Id for the copy. Must not already be in use."""


@dataclass
class NoteQuery:
    """Represents criteria for searching for notes.

    Some methods that take a NoteQuery parameter also accept strings as a convenience, which they
    pass to :meth:`parse`
    """

    term: str = ''
    """If non-empty, only notes whose content contains this exact substring match (case-sensitive)."""

    @classmethod
    def parse(cls, strquery: NoteQueryIsh) -> NoteQuery:
        """Converts the parameter to a NoteQuery, if it isn't one already.

        The whole string is used as the search term, without any trimming, so ``" milk"`` will not
        match ``"milkshake"``.
        """
        if isinstance(strquery, NoteQuery):
            return strquery
        return cls(term=strquery or '')

    def apply_filtering(self, notes: Iterable[Note]) -> Iterator[Note]:
        """Yields the entries from the given iterable which match the criteria of this query."""
        for note in notes:
            if self.term and self.term not in note.content:
                continue
            yield note

    def apply_sorting(self, notes: Iterable[Note]) -> List[Note]:
        """Returns a copy of the given notes with pinned notes first.

        The sort is stable, so notes with the same pinned state keep the order they were given in.
        Since new notes are appended to the collection, for stored notes that means creation order.
        """
        return sorted(notes, key=lambda note: not note.fixed)


NoteQueryIsh = Union[str, NoteQuery]
