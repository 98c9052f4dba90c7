"""Pydantic models for people and their contact details.

A person carries three repeating groups of contact details (emails, phone
numbers and addresses).  ``PersonForm`` is the editable shape that the
admin forms submit; ``PersonRecord`` is the shape the people API returns
on reads.  Each repeating group is tagged by a ``ContactGroup`` member
that selects its entry model and its blank-row factory.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Value of a single submitted form field.
FormValue = str | bool


class ContactGroup(str, Enum):
    EMAILS = "emails"
    PHONES = "phones"
    ADDRESSES = "addresses"


# Collection keys used by the people API on create / update.
API_COLLECTION_KEYS: dict[ContactGroup, str] = {
    ContactGroup.EMAILS: "emails_attributes",
    ContactGroup.PHONES: "phone_numbers_attributes",
    ContactGroup.ADDRESSES: "addresses_attributes",
}

SCALAR_FIELDS: tuple[str, ...] = ("id", "first_name", "last_name", "date_of_birth")


def _stringify(value: Any) -> Any:
    # The API hands out integer ids; forms always carry strings.
    if value is None or isinstance(value, str):
        return value
    return str(value)


class ContactEntry(BaseModel):
    """Fields shared by every contact detail row."""

    model_config = ConfigDict(extra="allow")

    # Attribute names specific to the row kind, in display order.
    value_fields: ClassVar[tuple[str, ...]] = ()

    id: str | None = None
    is_primary: bool = False
    destroy: bool = Field(default=False, alias="_destroy")

    normalize_id = field_validator("id", mode="before")(_stringify)

    def form_items(self) -> list[tuple[str, Any]]:
        """Return ``(attribute, value)`` pairs in form order, extras last."""
        items: list[tuple[str, Any]] = [("id", self.id)]
        items.extend((name, getattr(self, name)) for name in self.value_fields)
        items.append(("is_primary", self.is_primary))
        items.append(("_destroy", self.destroy))
        items.extend((self.model_extra or {}).items())
        return items

    def known_fields(self) -> ContactEntry:
        """Return a copy without any pass-through attributes."""
        data = {
            field.alias or name: getattr(self, name)
            for name, field in type(self).model_fields.items()
        }
        return type(self).model_validate(data)

    def to_api_payload(self) -> dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude_none=True)
        if not payload.get("_destroy"):
            payload.pop("_destroy", None)
        return payload


class EmailEntry(ContactEntry):
    value_fields: ClassVar[tuple[str, ...]] = ("email",)

    email: FormValue | None = None


class PhoneEntry(ContactEntry):
    value_fields: ClassVar[tuple[str, ...]] = ("mobile_number",)

    mobile_number: FormValue | None = None


class AddressEntry(ContactEntry):
    value_fields: ClassVar[tuple[str, ...]] = (
        "street",
        "city",
        "state",
        "country",
        "landmark",
        "postal_code",
    )

    street: FormValue | None = None
    city: FormValue | None = None
    state: FormValue | None = None
    country: FormValue | None = None
    landmark: FormValue | None = None
    postal_code: FormValue | None = None


class PersonForm(BaseModel):
    """Editable person as submitted by the create / edit forms.

    Keys the form layer does not know about are kept as extras and
    forwarded untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    first_name: FormValue | None = None
    last_name: FormValue | None = None
    date_of_birth: FormValue | None = None
    emails: list[EmailEntry] = []
    phones: list[PhoneEntry] = []
    addresses: list[AddressEntry] = []

    normalize_id = field_validator("id", mode="before")(_stringify)

    def entries(self, group: ContactGroup | str) -> list[ContactEntry]:
        return getattr(self, ContactGroup(group).value)

    def to_api_payload(self) -> dict[str, Any]:
        """Build the JSON body the people API expects on create / update.

        Example::

            {
                "first_name": "Akshay",
                "emails_attributes": [{"email": "a@x.com", "is_primary": true}],
                "phone_numbers_attributes": [],
                "addresses_attributes": []
            }
        """
        payload = self.model_dump(
            exclude_none=True,
            exclude={group.value for group in ContactGroup},
        )
        for group in ContactGroup:
            payload[API_COLLECTION_KEYS[group]] = [
                entry.to_api_payload() for entry in self.entries(group)
            ]
        return payload


class PersonRecord(BaseModel):
    """A person as returned by the people API."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: str | None = None
    emails: list[EmailEntry] = []
    phone_numbers: list[PhoneEntry] = []
    addresses: list[AddressEntry] = []
    deleted_at: str | None = None

    normalize_id = field_validator("id", mode="before")(_stringify)

    @field_validator("emails", "phone_numbers", "addresses", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def primary_email(self) -> str | None:
        entry = primary_entry(self.emails)
        return None if entry is None else entry.email

    @property
    def primary_phone(self) -> str | None:
        entry = primary_entry(self.phone_numbers)
        return None if entry is None else entry.mobile_number

    def to_form(self) -> PersonForm:
        """Map the record onto the editable form shape.

        Bookkeeping columns the API adds to contact rows (timestamps,
        foreign keys) are dropped so they never reach the rendered form.
        """
        return PersonForm(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            date_of_birth=self.date_of_birth,
            emails=[entry.known_fields() for entry in self.emails],
            phones=[entry.known_fields() for entry in self.phone_numbers],
            addresses=[entry.known_fields() for entry in self.addresses],
        )


class PersonSummary(BaseModel):
    """One row of the people list."""

    id: str
    name: str
    date_of_birth: str | None = None
    emails: list[EmailEntry] = []
    phones: list[PhoneEntry] = []
    addresses: list[AddressEntry] = []
    deleted: bool = False
    primary_email: FormValue | None = None
    primary_phone: FormValue | None = None

    @classmethod
    def from_record(cls, record: PersonRecord) -> PersonSummary:
        return cls(
            id=record.id,
            name=record.name,
            date_of_birth=record.date_of_birth,
            emails=[entry.known_fields() for entry in record.emails],
            phones=[entry.known_fields() for entry in record.phone_numbers],
            addresses=[entry.known_fields() for entry in record.addresses],
            deleted=record.deleted,
            primary_email=record.primary_email,
            primary_phone=record.primary_phone,
        )


def primary_entry(entries: list[ContactEntry]) -> ContactEntry | None:
    """Return the first entry flagged primary, or ``None``."""
    for entry in entries:
        if entry.is_primary:
            return entry
    return None


# ---------------------------------------------------------------------------
# Blank rows
# ---------------------------------------------------------------------------


def new_email_entry() -> EmailEntry:
    return EmailEntry(email="", is_primary=False)


def new_phone_entry() -> PhoneEntry:
    return PhoneEntry(mobile_number="", is_primary=False)


def new_address_entry() -> AddressEntry:
    return AddressEntry(
        street="",
        city="",
        state="",
        country="",
        landmark="",
        postal_code="",
        is_primary=False,
    )


_ENTRY_FACTORIES: dict[ContactGroup, Callable[[], ContactEntry]] = {
    ContactGroup.EMAILS: new_email_entry,
    ContactGroup.PHONES: new_phone_entry,
    ContactGroup.ADDRESSES: new_address_entry,
}


def new_entry(group: ContactGroup | str) -> ContactEntry:
    """Return a fresh blank row for *group*."""
    return _ENTRY_FACTORIES[ContactGroup(group)]()


def new_person_form() -> PersonForm:
    """Return a blank form with one empty row per contact group."""
    return PersonForm(
        first_name="",
        last_name="",
        date_of_birth="",
        emails=[new_email_entry()],
        phones=[new_phone_entry()],
        addresses=[new_address_entry()],
    )
