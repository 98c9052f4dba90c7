"""Nested form-field codec for person records.

HTML forms can only submit flat ``name=value`` pairs, so the create and
edit screens name the controls of repeating contact rows with a
bracketed path::

    first_name
    emails[0].email
    emails[0].is_primary
    addresses[2].postal_code

``decode`` folds such a submission back into a ``PersonForm``; ``encode``
and ``form_fields`` produce the names a renderer must use so that the
submission round-trips.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel

from people_admin.models.people import (
    SCALAR_FIELDS,
    ContactGroup,
    FormValue,
    PersonForm,
)

logger = logging.getLogger(__name__)

# Checkboxes submit this value when ticked and nothing at all otherwise.
CHECKBOX_ON: str = "on"
CHECKBOX_FIELDS: frozenset[str] = frozenset({"is_primary", "_destroy"})

_CONTACT_GROUPS: frozenset[str] = frozenset(group.value for group in ContactGroup)

_FIELD_PATH_RE = re.compile(
    r"^(?P<group>[^\[\].]+)(?:\[(?P<index>\d+)\])?(?:\.(?P<field>[^\[\].]+))?$"
)

FormInput = Mapping[str, Any] | Iterable[tuple[str, Any]]


class FieldPath(NamedTuple):
    """A parsed form key: ``group``, or ``group[index].field``."""

    group: str
    index: int | None = None
    field: str | None = None

    def __str__(self) -> str:
        if self.index is None:
            return self.group
        return f"{self.group}[{self.index}].{self.field}"


class FormField(BaseModel):
    """One control a renderer has to emit."""

    name: str
    value: FormValue
    kind: Literal["text", "hidden", "checkbox"] = "text"
    checked: bool | None = None


def parse_field_path(key: str) -> FieldPath | None:
    """Split *key* into its parts.

    Returns ``None`` when the key is not a bare attribute name or a
    complete ``group[index].field`` path on one of the contact groups.
    """
    match = _FIELD_PATH_RE.match(key)
    if match is None:
        return None

    group, index, field = match.group("group", "index", "field")
    if index is None:
        return FieldPath(group) if field is None else None
    if field is None or group not in _CONTACT_GROUPS:
        return None
    return FieldPath(group, int(index), field)


def decode(fields: FormInput) -> PersonForm:
    """Fold a flat form submission into a ``PersonForm``.

    *fields* may be a sequence of ``(key, value)`` pairs, a mapping, or a
    Starlette ``FormData``.  Later values for the same key win.  Rows are
    ordered by ascending index and compacted, so ``emails[0]`` and
    ``emails[5]`` become the first and second email.  Keys that don't fit
    the path grammar are kept whole as top-level values.
    """
    scalars: dict[str, Any] = {}
    rows: dict[ContactGroup, dict[int, dict[str, Any]]] = {
        group: {} for group in ContactGroup
    }

    for key, value in _iter_pairs(fields):
        path = parse_field_path(key)

        if path is None:
            logger.debug("Keeping unrecognised form key %r as a top-level value", key)
            scalars[key] = value
            continue

        if path.index is None:
            if path.group in _CONTACT_GROUPS:
                logger.warning("Ignoring form key %r: contact rows need an index", key)
                continue
            scalars[path.group] = value
            continue

        row = rows[ContactGroup(path.group)].setdefault(path.index, {})
        row[path.field] = _coerce(path.field, value)

    data = dict(scalars)
    for group, indexed in rows.items():
        data[group.value] = [indexed[index] for index in sorted(indexed)]
    return PersonForm.model_validate(data)


def encode(form: PersonForm) -> list[tuple[str, FormValue]]:
    """Return the ``(key, value)`` pairs a browser would submit for *form*.

    Unset attributes are left out and checkbox flags are only sent when
    ticked, so ``decode(encode(form))`` rebuilds *form*.
    """
    pairs: list[tuple[str, FormValue]] = []

    for name in SCALAR_FIELDS:
        value = getattr(form, name)
        if value is not None:
            pairs.append((name, value))
    for name, value in (form.model_extra or {}).items():
        if value is not None:
            pairs.append((name, value))

    for group in ContactGroup:
        for index, entry in enumerate(form.entries(group)):
            for field, value in entry.form_items():
                name = str(FieldPath(group.value, index, field))
                if field in CHECKBOX_FIELDS:
                    if value:
                        pairs.append((name, CHECKBOX_ON))
                elif value is not None:
                    pairs.append((name, value))

    return pairs


def form_fields(form: PersonForm) -> list[FormField]:
    """Describe every control needed to render *form*.

    Unlike ``encode`` this lists unticked checkboxes and blank values so
    a renderer can draw complete rows.  Ids become hidden inputs, and
    persisted rows also get a ``_destroy`` checkbox.
    """
    fields: list[FormField] = []

    if form.id is not None:
        fields.append(FormField(name="id", value=form.id, kind="hidden"))
    for name in SCALAR_FIELDS[1:]:
        value = getattr(form, name)
        fields.append(FormField(name=name, value="" if value is None else value))

    for group in ContactGroup:
        for index, entry in enumerate(form.entries(group)):
            for field, value in entry.form_items():
                name = str(FieldPath(group.value, index, field))
                if field == "id":
                    if value is not None:
                        fields.append(FormField(name=name, value=value, kind="hidden"))
                elif field in CHECKBOX_FIELDS:
                    if field == "_destroy" and entry.id is None:
                        continue
                    fields.append(
                        FormField(
                            name=name,
                            value=CHECKBOX_ON,
                            kind="checkbox",
                            checked=bool(value),
                        )
                    )
                else:
                    fields.append(FormField(name=name, value="" if value is None else value))

    return fields


def _iter_pairs(fields: FormInput) -> Iterable[tuple[str, Any]]:
    # FormData.items() only yields the last value of a repeated key.
    if hasattr(fields, "multi_items"):
        return fields.multi_items()
    if isinstance(fields, Mapping):
        return fields.items()
    return fields


def _coerce(field: str, value: Any) -> Any:
    if field in CHECKBOX_FIELDS:
        return value is True or value == CHECKBOX_ON
    return value
