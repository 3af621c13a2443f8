"""Field validation shared by the API and the client workflow.

Every rule runs; callers get the full list of violations in one pass.
"""

import re
from typing import List, Mapping

from ..domain import DETAILS_MAX_LENGTH, RecordKind

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[6-9]\d{9}$")


def text(value) -> str:
    """Coerce a raw form/JSON value to a trimmed string."""
    if value is None:
        return ""
    return str(value).strip()


def clip_details(value: str) -> str:
    """Input-time cap on report details, like a maxlength attribute."""
    return (value or "")[:DETAILS_MAX_LENGTH]


def normalize_phone(value: str) -> str:
    return re.sub(r"\D", "", value or "")[-10:]


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_RE.match(normalize_phone(value)))


def validate_report(fields: Mapping) -> List[str]:
    errs = []
    if not text(fields.get("name")):
        errs.append("Name is required")
    if not text(fields.get("college")):
        errs.append("College is required")

    details = fields.get("details") or ""
    if not text(details):
        errs.append("Please describe the problem")
    if len(details) > DETAILS_MAX_LENGTH:
        errs.append(f"Problem details are too long (max {DETAILS_MAX_LENGTH} chars)")
    return errs


def validate_member(fields: Mapping) -> List[str]:
    errs = []
    name = text(fields.get("name"))
    college = text(fields.get("college"))
    email = text(fields.get("email"))
    whatsapp = text(fields.get("whatsapp"))

    if not name:
        errs.append("Name is required")
    if not college:
        errs.append("College is required")
    if not email:
        errs.append("Email is required")
    if not whatsapp:
        errs.append("WhatsApp number is required")
    if not fields.get("photo"):
        errs.append("Photo is required")

    # format rules see the raw value; surrounding spaces are not allowed
    if email and not is_valid_email(str(fields.get("email"))):
        errs.append("Please enter a valid email")
    if whatsapp and not is_valid_phone(whatsapp):
        errs.append("Please enter a valid 10-digit WhatsApp number")
    return errs


_VALIDATORS = {
    RecordKind.REPORT: validate_report,
    RecordKind.MEMBER: validate_member,
}


def validate(kind: RecordKind, fields: Mapping) -> List[str]:
    return _VALIDATORS[kind](fields)


def missing_required(kind: RecordKind, payload: Mapping) -> List[str]:
    """Server-side presence check; format rules stay on the client."""
    return [f for f in kind.spec.required if not text(payload.get(f))]
