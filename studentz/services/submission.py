"""Server-side submission: presence check -> mint identifier -> insert."""

from typing import Any, Dict, Mapping

from flask import current_app

from ..domain import RecordKind
from ..errors.exceptions import ValidationFailure
from ..models import Member, Report
from . import identifiers
from .store import parse_limit, store_for
from .validation import missing_required, text


def _mint(kind: RecordKind) -> str:
    if kind is RecordKind.REPORT:
        return identifiers.new_reference_id()
    return identifiers.new_member_id()


def extract_fields(kind: RecordKind, payload: Mapping) -> Dict[str, Any]:
    """Keep only known fields, stored as submitted; blank fields become None."""
    fields = {}
    for name in kind.spec.fields:
        value = payload.get(name)
        fields[name] = str(value) if text(value) else None
    return fields


def build_record(kind: RecordKind, identifier: str, fields: Mapping):
    if kind is RecordKind.REPORT:
        return Report(reference_id=identifier, **fields)
    return Member(member_id=identifier, **fields)


def submit_record(kind: RecordKind, payload: Mapping):
    """
    Create one record. Raises ValidationFailure when a required field is
    blank, DuplicateIdentifier on identifier collision (no retry), and
    StoreFailure for anything else the store rejects.
    """
    payload = payload if isinstance(payload, Mapping) else {}

    missing = missing_required(kind, payload)
    if missing:
        raise ValidationFailure(kind.spec.required_message, missing)

    fields = extract_fields(kind, payload)
    identifier = _mint(kind)
    record = build_record(kind, identifier, fields)

    store_for(kind).insert(record)
    current_app.logger.info("[submit_record] kind=%s id=%s", kind.spec.singular, identifier)
    return record


def list_records(kind: RecordKind, raw_limit=None):
    store = store_for(kind)
    limit = parse_limit(raw_limit, store.default_limit)
    return store.list(limit)
