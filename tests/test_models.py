import pytest

from notepin.models import Note, NoteQuery


def test_as_json():
    assert Note(7, 'buy milk', True).as_json() == {'id': 7, 'content': 'buy milk', 'fixed': True}


def test_from_json():
    assert Note.from_json({'id': 7, 'content': 'buy milk', 'fixed': True}) == Note(7, 'buy milk', True)


def test_from_json_defaults():
    assert Note.from_json({'id': 3}) == Note(3, '', False)
    assert Note.from_json({'id': 3, 'content': None}) == Note(3, '', False)


@pytest.mark.parametrize('record', [
    None,
    [1, 'a', False],
    {'content': 'no id'},
    {'id': '12', 'content': 'string id'},
    {'id': True, 'content': 'boolean id'},
    {'id': 1, 'content': 42},
    {'id': 1, 'content': 'a', 'fixed': 'false'},
    {'id': 1, 'content': 'a', 'fixed': [0]},
    {'id': 1, 'content': 'a', 'fixed': 1},
])
def test_from_json_rejects_bad_records(record):
    with pytest.raises(ValueError):
        Note.from_json(record)


def test_parse_query():
    assert NoteQuery.parse('milk') == NoteQuery('milk')
    assert NoteQuery.parse('') == NoteQuery()
    assert NoteQuery.parse(None) == NoteQuery()
    query = NoteQuery(' milk')
    assert NoteQuery.parse(query) is query


def test_apply_filtering():
    notes = [Note(1, 'buy milk'), Note(2, 'walk dog'), Note(3, 'Buy bread')]
    assert list(NoteQuery('buy').apply_filtering(notes)) == [notes[0]]
    assert list(NoteQuery('Buy').apply_filtering(notes)) == [notes[2]]
    assert list(NoteQuery('').apply_filtering(notes)) == notes
    assert not list(NoteQuery('cat').apply_filtering(notes))


def test_apply_sorting_pinned_first_and_stable():
    notes = [Note(1, 'a'), Note(2, 'b', True), Note(3, 'c'), Note(4, 'd', True)]
    assert NoteQuery().apply_sorting(notes) == [notes[1], notes[3], notes[0], notes[2]]
    assert NoteQuery().apply_sorting([]) == []
