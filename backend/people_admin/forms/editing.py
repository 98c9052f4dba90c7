"""Row editing helpers for person forms.

These mirror what the edit screen does while the user is working on a
form: add a blank row, change one attribute, remove a row, or flag a
saved row for deletion.  Every helper returns a new ``PersonForm`` and
leaves its input untouched.  Ticking ``is_primary`` on one row clears it
on the other rows of the same group.
"""

from __future__ import annotations

import logging
from typing import Any

from people_admin.models.people import (
    ContactEntry,
    ContactGroup,
    PersonForm,
    new_entry,
)

logger = logging.getLogger(__name__)


def add_entry(form: PersonForm, group: ContactGroup | str) -> PersonForm:
    """Append a blank row to *group*."""
    group = ContactGroup(group)
    entries = [*form.entries(group), new_entry(group)]
    return form.model_copy(update={group.value: entries})


def update_entry(
    form: PersonForm,
    group: ContactGroup | str,
    index: int,
    field: str,
    value: Any,
) -> PersonForm:
    """Set *field* on row *index* of *group*.

    Raises
    ------
    IndexError
        If *index* does not address an existing row.
    """
    group = ContactGroup(group)
    entries = list(form.entries(group))
    _check_index(entries, group, index)

    entries[index] = _with_field(entries[index], field, value)
    if field == "is_primary" and entries[index].is_primary:
        entries = [
            entry if i == index or not entry.is_primary else _with_field(entry, "is_primary", False)
            for i, entry in enumerate(entries)
        ]
    return form.model_copy(update={group.value: entries})


def remove_entry(form: PersonForm, group: ContactGroup | str, index: int) -> PersonForm:
    """Drop row *index* from *group*."""
    group = ContactGroup(group)
    entries = list(form.entries(group))
    _check_index(entries, group, index)
    del entries[index]
    return form.model_copy(update={group.value: entries})


def mark_for_destroy(form: PersonForm, group: ContactGroup | str, index: int) -> PersonForm:
    """Flag row *index* so the people API deletes it on the next update.

    A row that was never saved has nothing to delete server-side and is
    simply removed.
    """
    group = ContactGroup(group)
    entries = list(form.entries(group))
    _check_index(entries, group, index)

    if entries[index].id is None:
        return remove_entry(form, group, index)

    logger.debug("Marking %s[%d] (id=%s) for deletion", group.value, index, entries[index].id)
    entries[index] = _with_field(entries[index], "_destroy", True)
    return form.model_copy(update={group.value: entries})


def _check_index(entries: list[ContactEntry], group: ContactGroup, index: int) -> None:
    if not 0 <= index < len(entries):
        raise IndexError(f"{group.value} has no row at index {index}")


def _with_field(entry: ContactEntry, field: str, value: Any) -> ContactEntry:
    data = entry.model_dump(by_alias=True)
    data[field] = value
    return type(entry).model_validate(data)
