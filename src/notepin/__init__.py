"""Keeps short text notes that can be pinned, duplicated, searched, and exported.

If you installed via ``pip``, run ``notepin -h`` to get help.

To use the Python API, look at :class:`notepin.api.Notepin`, or construct a
:class:`notepin.store.NoteStore` around any :class:`notepin.backends.base.Backend`.
"""
