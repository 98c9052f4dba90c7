"""People management endpoints.

- GET    /api/people               -> list / search people
- GET    /api/people/new           -> blank create form with its field names
- GET    /api/people/{id}          -> one person as an editable form
- POST   /api/people               -> create from a form submission
- POST   /api/people/{id}          -> update from a form submission (PUT too)
- DELETE /api/people/{id}          -> soft delete
- POST   /api/people/bulk-delete   -> soft delete several people
- POST   /api/people/{id}/restore  -> undo a soft delete

Create and update accept the flat ``application/x-www-form-urlencoded``
(or multipart) body the admin forms submit, e.g. ``emails[0].email=...``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from people_admin.forms import decode, form_fields
from people_admin.models.people import (
    PersonForm,
    PersonRecord,
    PersonSummary,
    new_person_form,
)
from people_admin.people_api import (
    PeopleAPIClient,
    PeopleAPIError,
    PersonNotFoundError,
    get_people_api,
    search_people,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["people"])


class BulkDeleteRequest(BaseModel):
    ids: list[str]


def _upstream_error(exc: PeopleAPIError) -> HTTPException:
    if isinstance(exc, PersonNotFoundError):
        return HTTPException(status_code=404, detail="Person not found.")
    return HTTPException(status_code=502, detail=exc.message)


def _form_response(form: PersonForm) -> dict:
    return {
        "person": form.model_dump(mode="json", by_alias=True, exclude_none=True),
        "fields": [field.model_dump(mode="json", exclude_none=True) for field in form_fields(form)],
    }


def _record_response(record: PersonRecord | None) -> dict:
    if record is None:
        return {"person": None}
    return {"person": record.to_form().model_dump(mode="json", by_alias=True, exclude_none=True)}


@router.get("/people")
async def list_people(
    q: str | None = None,
    include_deleted: bool = True,
    api: PeopleAPIClient = Depends(get_people_api),
):
    """List people, optionally filtered by a search query.

    Soft-deleted people are included (flagged ``deleted``) unless
    ``include_deleted`` is false.
    """
    try:
        records = await api.list_people()
    except PeopleAPIError as exc:
        raise _upstream_error(exc) from exc

    matches = search_people(records, q, include_deleted=include_deleted)
    people = [PersonSummary.from_record(record).model_dump(mode="json", by_alias=True) for record in matches]
    return {"people": people, "total": len(people)}


@router.get("/people/new")
async def new_person():
    """Return a blank form with one empty row per contact group."""
    return _form_response(new_person_form())


@router.post("/people/bulk-delete")
async def bulk_delete_people(
    request: BulkDeleteRequest,
    api: PeopleAPIClient = Depends(get_people_api),
):
    """Soft-delete every person in ``ids``."""
    if not request.ids:
        raise HTTPException(status_code=400, detail="No people selected.")

    try:
        await api.delete_people(request.ids)
    except PeopleAPIError as exc:
        logger.exception("Bulk delete failed")
        raise _upstream_error(exc) from exc

    return {"deleted": request.ids, "total": len(request.ids)}


@router.get("/people/{person_id}")
async def get_person(person_id: str, api: PeopleAPIClient = Depends(get_people_api)):
    """Return a person as an editable form plus the field names to render."""
    try:
        record = await api.get_person(person_id)
    except PeopleAPIError as exc:
        raise _upstream_error(exc) from exc

    return _form_response(record.to_form())


@router.post("/people", status_code=201)
async def create_person(request: Request, api: PeopleAPIClient = Depends(get_people_api)):
    """Create a person from a submitted form."""
    form = decode(await request.form())

    try:
        record = await api.create_person(form)
    except PeopleAPIError as exc:
        logger.exception("Failed to create person")
        raise _upstream_error(exc) from exc

    return _record_response(record)


@router.put("/people/{person_id}")
@router.post("/people/{person_id}")
async def update_person(
    person_id: str,
    request: Request,
    api: PeopleAPIClient = Depends(get_people_api),
):
    """Update a person from a submitted form.

    HTML forms can only POST, so POST is accepted alongside PUT.
    """
    form = decode(await request.form())

    try:
        record = await api.update_person(person_id, form)
    except PeopleAPIError as exc:
        logger.exception("Failed to update person %s", person_id)
        raise _upstream_error(exc) from exc

    return _record_response(record)


@router.delete("/people/{person_id}")
async def delete_person(person_id: str, api: PeopleAPIClient = Depends(get_people_api)):
    """Soft-delete a person."""
    try:
        await api.delete_person(person_id)
    except PeopleAPIError as exc:
        raise _upstream_error(exc) from exc

    return {"deleted": person_id}


@router.post("/people/{person_id}/restore")
async def restore_person(person_id: str, api: PeopleAPIClient = Depends(get_people_api)):
    """Restore a soft-deleted person."""
    try:
        await api.restore_person(person_id)
    except PeopleAPIError as exc:
        raise _upstream_error(exc) from exc

    return {"restored": person_id}
