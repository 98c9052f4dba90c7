"""Form handling for the person create / edit screens.

``codec`` converts between flat form submissions and ``PersonForm``
records; ``editing`` holds the row operations the edit screen performs.
"""

from people_admin.models.people import primary_entry

from .codec import FieldPath, FormField, decode, encode, form_fields, parse_field_path
from .editing import add_entry, mark_for_destroy, remove_entry, update_entry

__all__ = [
    "FieldPath",
    "FormField",
    "decode",
    "encode",
    "form_fields",
    "parse_field_path",
    "add_entry",
    "update_entry",
    "remove_entry",
    "mark_for_destroy",
    "primary_entry",
]
