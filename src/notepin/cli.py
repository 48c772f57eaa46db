"""Command-line interface for notepin."""


import argparse
import json
import logging
import sys
from typing import List
from terminaltables import AsciiTable
from notepin.api import Notepin
from notepin.models import Note
from notepin.store import NotFoundError


def _print_notes(notes: List[Note], args) -> None:
    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
    elif args.table:
        data = [('ID', 'Pinned', 'Content')]
        data.extend((str(n.id), '*' if n.fixed else '', n.content) for n in notes)
        table = AsciiTable(data)
        table.justify_columns[0] = 'right'
        print(table.table)
    else:
        for note in notes:
            marker = '*' if note.fixed else ' '
            print(f'{marker} {note.id}: {note.content}')


def _list(args, np: Notepin) -> int:
    _print_notes(np.store.list(), args)
    return 0


def _search(args, np: Notepin) -> int:
    _print_notes(np.store.search(args.term or ''), args)
    return 0


def _add(args, np: Notepin) -> int:
    content = ' '.join(args.content)
    note = np.store.create(content)
    if args.json:
        print(json.dumps(note.as_json()))
    elif not args.preview:
        print(f'Created {note.id}')
    return 0


def _edit(args, np: Notepin) -> int:
    np.store.update(args.id[0], ' '.join(args.content))
    return 0


def _rm(args, np: Notepin) -> int:
    np.store.delete(args.id[0])
    return 0


def _pin(args, np: Notepin) -> int:
    np.store.toggle_pin(args.id[0])
    if not args.preview:
        note = np.store.get(args.id[0])
        print(f'{"Pinned" if note.fixed else "Unpinned"} {note.id}')
    return 0


def _dup(args, np: Notepin) -> int:
    note = np.store.duplicate(args.id[0])
    if args.json:
        print(json.dumps(note.as_json()))
    elif not args.preview:
        print(f'Created {note.id}')
    return 0


def _export(args, np: Notepin) -> int:
    if args.dest == '-':
        print(np.store.export())
        return 0
    path = np.export_to(args.dest, check_exists=not args.force)
    if not args.preview:
        print(f'Exported to {path}')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.set_defaults(func=None, preview=False, json=False)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging details to stderr.')

    subs = parser.add_subparsers(title='Commands')

    def add_formats(p):
        formats = p.add_mutually_exclusive_group()
        formats.add_argument('-j', '--json', help='Output as JSON.', action='store_true')
        formats.add_argument('-t', '--table', help='Format output as a table.', action='store_true')

    def add_preview(p):
        p.add_argument('-p', '--preview', action='store_true',
                       help='Print changes to be made but do not change notes')

    p_list = subs.add_parser('list', help='Show all notes. Pinned notes are shown first, marked with "*".')
    add_formats(p_list)
    p_list.set_defaults(func=_list)

    p_search = subs.add_parser(
        'search',
        help='Show notes containing the given text. Matching is case-sensitive. Pinned notes are shown first.')
    p_search.add_argument('term', nargs='?', help='Text to search for. If omitted, all notes are shown.')
    add_formats(p_search)
    p_search.set_defaults(func=_search)

    p_add = subs.add_parser('add', help='Create a new note. This command will print the id of the new note.')
    p_add.add_argument('content', nargs='*', help='Text of the note. Multiple arguments are joined with spaces.')
    p_add.add_argument('-j', '--json', action='store_true', help='Output the new note as JSON.')
    add_preview(p_add)
    p_add.set_defaults(func=_add)

    p_edit = subs.add_parser('edit', help='Replace the text of a note.')
    p_edit.add_argument('id', nargs=1, type=int)
    p_edit.add_argument('content', nargs='*', help='New text of the note. Multiple arguments are joined with spaces.')
    add_preview(p_edit)
    p_edit.set_defaults(func=_edit)

    p_rm = subs.add_parser('rm', help='Delete a note. Deleting a note that does not exist is not an error.')
    p_rm.add_argument('id', nargs=1, type=int)
    add_preview(p_rm)
    p_rm.set_defaults(func=_rm)

    p_pin = subs.add_parser('pin', help='Pin a note, or unpin it if it is already pinned.')
    p_pin.add_argument('id', nargs=1, type=int)
    add_preview(p_pin)
    p_pin.set_defaults(func=_pin)

    p_dup = subs.add_parser('dup', help='Create an unpinned copy of a note. This command will print the new id.')
    p_dup.add_argument('id', nargs=1, type=int)
    p_dup.add_argument('-j', '--json', action='store_true', help='Output the new note as JSON.')
    add_preview(p_dup)
    p_dup.set_defaults(func=_dup)

    p_export = subs.add_parser(
        'export',
        help='Write all notes as comma-separated text, in creation order. Fields are not quoted, so notes '
             'containing commas or line breaks will not be read back correctly by spreadsheet programs.')
    p_export.add_argument('dest', nargs='?',
                          help='File to write, or "-" for standard output. Defaults to conf.export_filename. '
                               'If the file exists, a unique filename is chosen instead, unless --force is given.')
    p_export.add_argument('-f', '--force', action='store_true', help='Overwrite the destination if it exists.')
    add_preview(p_export)
    p_export.set_defaults(func=_export)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if not args.func:
        parser.print_help()
        return 1
    with Notepin.for_user() as np:
        if args.preview:
            np.store.preview_mode = True
        try:
            return args.func(args, np)
        except NotFoundError as e:
            print(str(e), file=sys.stderr)
            return 1
