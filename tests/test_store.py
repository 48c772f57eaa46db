import itertools
import json

import pytest

from notepin.backends.memory import MemoryBackend
from notepin.models import Note, CreateCmd, UpdateCmd, DeleteCmd, TogglePinCmd, DuplicateCmd
from notepin.store import NoteStore, NotFoundError, DuplicateIdError, export_rows, parse_notes, serialize_notes


def new_store(values=None, ids=None):
    ids = ids if ids is not None else itertools.count(1)
    return NoteStore(MemoryBackend(values), id_generator=iter(ids).__next__)


def stored(store):
    return json.loads(store.backend.get('notes'))


def test_list_empty():
    assert new_store().list() == []


@pytest.mark.parametrize('data', ['', 'not json', '{"id": 1}', '[1, 2]', '[{"content": "no id"}]', 'null',
                                  '[{"id": 1, "content": "a", "fixed": "false"}]', '[' * 100000])
def test_list_corrupt_data(data):
    assert new_store({'notes': data}).list() == []


def test_list_skips_repeated_ids():
    data = json.dumps([{'id': 1, 'content': 'a', 'fixed': False}, {'id': 1, 'content': 'b', 'fixed': True}])
    assert new_store({'notes': data}).list() == [Note(1, 'a')]


def test_create_then_list():
    store = new_store()
    note = store.create('buy milk')
    assert note == Note(1, 'buy milk', False)
    assert store.list() == [note]
    assert stored(store) == [{'id': 1, 'content': 'buy milk', 'fixed': False}]


def test_create_empty_content():
    store = new_store()
    assert store.create().content == ''
    assert store.list() == [Note(1, '')]


def test_create_skips_ids_in_use():
    store = new_store(ids=[5, 5, 5, 9])
    assert store.create('a').id == 5
    assert store.create('b').id == 9
    assert [n.id for n in store.list()] == [5, 9]


def test_uses_custom_key():
    backend = MemoryBackend()
    store = NoteStore(backend, key='other', id_generator=itertools.count(1).__next__)
    store.create('x')
    assert backend.get('notes') is None
    assert json.loads(backend.get('other')) == [{'id': 1, 'content': 'x', 'fixed': False}]


def test_update():
    store = new_store()
    note = store.create('buy milk')
    store.toggle_pin(note.id)
    store.update(note.id, 'buy oat milk')
    assert store.list() == [Note(note.id, 'buy oat milk', True)]


def test_update_missing():
    store = new_store()
    store.create('a')
    with pytest.raises(NotFoundError) as excinfo:
        store.update(42, 'b')
    assert excinfo.value.note_id == 42
    assert store.list() == [Note(1, 'a')]


def test_delete():
    store = new_store()
    a = store.create('a')
    b = store.create('b')
    store.delete(a.id)
    assert store.list() == [b]
    store.delete(b.id)
    assert store.list() == []


def test_delete_missing_is_noop():
    store = new_store()
    store.create('a')
    store.delete(42)
    store.delete(42)
    assert store.list() == [Note(1, 'a')]


def test_toggle_pin():
    store = new_store()
    a = store.create('a')
    b = store.create('b')
    store.toggle_pin(b.id)
    assert store.list() == [Note(b.id, 'b', True), a]
    store.toggle_pin(b.id)
    assert store.list() == [a, Note(b.id, 'b', False)]


def test_toggle_pin_missing():
    store = new_store()
    with pytest.raises(NotFoundError):
        store.toggle_pin(1)
    assert store.backend.get('notes') is None


def test_list_pinned_first_in_creation_order():
    store = new_store()
    notes = [store.create(c) for c in 'abcdef']
    for note in (notes[4], notes[1], notes[3]):
        store.toggle_pin(note.id)
    result = store.list()
    assert [n.content for n in result] == ['b', 'd', 'e', 'a', 'c', 'f']
    first_unpinned = next(i for i, n in enumerate(result) if not n.fixed)
    assert all(n.fixed for n in result[:first_unpinned])
    assert not any(n.fixed for n in result[first_unpinned:])


def test_duplicate():
    store = new_store()
    original = store.create('walk dog')
    store.toggle_pin(original.id)
    copy = store.duplicate(original.id)
    assert copy == Note(2, 'walk dog', False)
    assert store.get(original.id) == Note(1, 'walk dog', True)
    assert store.list() == [Note(1, 'walk dog', True), copy]


def test_duplicate_missing():
    store = new_store()
    with pytest.raises(NotFoundError):
        store.duplicate(3)
    assert store.list() == []


def test_get():
    store = new_store()
    store.create('a')
    assert store.get(1) == Note(1, 'a')
    with pytest.raises(NotFoundError):
        store.get(2)


def test_search():
    store = new_store()
    a = store.create('buy milk')
    b = store.create('walk dog')
    c = store.create('Buy dog food')
    store.toggle_pin(c.id)
    c.fixed = True
    assert store.search('dog') == [c, b]
    assert store.search('buy') == [a]
    assert store.search('Buy') == [c]
    assert store.search('cat') == []


def test_search_empty_term_matches_list():
    store = new_store()
    for content in ['one', 'two', 'three']:
        store.create(content)
    store.toggle_pin(2)
    assert store.search('') == store.list()


def test_change_applies_edits_in_one_write(mocker):
    store = new_store()
    spy = mocker.spy(store.backend, 'set')
    store.change([CreateCmd(1, 'a'), CreateCmd(2, 'b'), TogglePinCmd(2), UpdateCmd(1, 'A'),
                  DuplicateCmd(1, 3), DeleteCmd(2)])
    assert spy.call_count == 1
    assert store.raw() == [Note(1, 'A'), Note(3, 'A')]


def test_change_writes_nothing_on_failure():
    store = new_store()
    store.create('a')
    before = store.backend.get('notes')
    with pytest.raises(NotFoundError):
        store.change([UpdateCmd(1, 'changed'), TogglePinCmd(99)])
    assert store.backend.get('notes') == before


def test_change_rejects_duplicate_ids():
    store = new_store()
    store.create('a')
    with pytest.raises(DuplicateIdError):
        store.change([CreateCmd(1, 'b')])
    with pytest.raises(DuplicateIdError):
        store.change([DuplicateCmd(1, 1)])
    assert store.list() == [Note(1, 'a')]


def test_preview_mode(capsys):
    store = new_store()
    store.preview_mode = True
    store.create('a')
    store.delete(1)
    out, err = capsys.readouterr()
    assert out == str(CreateCmd(1, 'a')) + '\n' + str(DeleteCmd(1)) + '\n'
    assert store.backend.get('notes') is None


def test_replay_matches_expected_state():
    store = new_store()
    a = store.create('a')
    b = store.create('b')
    c = store.create('c')
    store.update(a.id, 'a2')
    store.toggle_pin(c.id)
    store.delete(b.id)
    store.delete(b.id)
    d = store.duplicate(c.id)
    store.toggle_pin(a.id)
    store.toggle_pin(a.id)
    expected = new_store({'notes': serialize_notes([Note(1, 'a2'), Note(3, 'c', True), Note(d.id, 'c')])})
    assert store.raw() == expected.raw()
    assert store.list() == [Note(3, 'c', True), Note(1, 'a2'), Note(d.id, 'c')]


def test_scenario():
    store = new_store()
    a = store.create('buy milk')
    b = store.create('walk dog')
    store.toggle_pin(b.id)
    assert [n.id for n in store.list()] == [b.id, a.id]
    assert store.search('dog') == [Note(b.id, 'walk dog', True)]
    assert store.export() == f'ID,Content,Fixed?\n{a.id},buy milk,false\n{b.id},walk dog,true'


def test_export_empty():
    assert new_store().export() == 'ID,Content,Fixed?'


def test_export_does_not_escape():
    notes = [Note(1, 'eggs, flour'), Note(2, 'line one\nline two', True)]
    assert export_rows(notes) == 'ID,Content,Fixed?\n1,eggs, flour,false\n2,line one\nline two,true'


def test_parse_notes():
    assert parse_notes('[{"id": 4, "content": "x", "fixed": true}]') == [Note(4, 'x', True)]
    with pytest.raises(ValueError):
        parse_notes('{}')
    with pytest.raises(ValueError):
        parse_notes('[')


def test_preview_mode_checks_edits(capsys):
    store = new_store()
    store.create('a')
    store.preview_mode = True
    with pytest.raises(NotFoundError):
        store.update(99, 'b')
    with pytest.raises(NotFoundError):
        store.toggle_pin(99)
    out, err = capsys.readouterr()
    assert out == ''
    store.toggle_pin(1)
    out, err = capsys.readouterr()
    assert out == str(TogglePinCmd(1)) + '\n'
    assert store.list() == [Note(1, 'a')]
