"""
Helpers for applicant form answers.

Answers arrive as JSON strings inside multipart fields. They are decoded with
explicit type checks; bad input is reported instead of being replaced with
empty values.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from talentdesk.core.exceptions import ValidationError

# Labels are compared case-insensitively, field names exactly
FULL_NAME_LABELS = {"full name"}
FULL_NAME_NAMES = {"full_name", "fullName"}
EMAIL_LABELS = {"email"}
EMAIL_NAMES = {"email"}
PHONE_LABELS = {"phone"}
PHONE_NAMES = {"phone"}


@dataclass
class ContactFields:
    full_name: str = ""
    email: str = ""
    phone: str = ""


def parse_json_field(raw: Optional[str], expected_type: type, field_name: str) -> Any:
    """
    Decode a JSON-encoded form field.

    None or an empty string yields an empty value of `expected_type`.

    Raises:
        ValidationError: If the text is not JSON or decodes to the wrong type
    """
    if raw is None or raw.strip() == "":
        return expected_type()

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError(f"{field_name} must be valid JSON")

    if value is None:
        return expected_type()
    if not isinstance(value, expected_type):
        kind = "array" if expected_type is list else "object"
        raise ValidationError(f"{field_name} must be a JSON {kind}")
    return value


def _find_value(fields: List[Dict[str, Any]], labels: set, names: set) -> str:
    for field in fields:
        if not isinstance(field, dict):
            continue
        label = field.get("label")
        if (isinstance(label, str) and label.strip().lower() in labels) or field.get("name") in names:
            value = field.get("value")
            return "" if value is None else str(value).strip()
    return ""


def extract_contact_fields(basic_form_data: Optional[List[Dict[str, Any]]]) -> ContactFields:
    """Pull full name, email and phone out of the basic-field answers."""
    fields = basic_form_data if isinstance(basic_form_data, list) else []
    return ContactFields(
        full_name=_find_value(fields, FULL_NAME_LABELS, FULL_NAME_NAMES),
        email=_find_value(fields, EMAIL_LABELS, EMAIL_NAMES),
        phone=_find_value(fields, PHONE_LABELS, PHONE_NAMES),
    )
