"""Client-side submission state machine.

    Idle -> Validating -> Invalid
                       -> Submitting -> Succeeded | Failed

Each transition returns a new SubmissionState; nothing is mutated in place,
so a whole submission can be replayed and asserted on without a UI.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from ..config import Config
from ..domain import DEFAULT_CATEGORY, STATUS_PENDING_SYNC, RecordKind, member_card
from ..errors.exceptions import ImageRejected, TransportFailure
from ..models.base import isoformat_z
from ..services import identifiers
from ..services.images import normalize_image
from ..services.validation import clip_details, validate
from .api import ApiError, PortalClient
from .cache import LocalMemberCache

logger = logging.getLogger(__name__)

NOTICE_SECONDS = 4.5

MSG_NETWORK = "Network error. Could not submit."
MSG_REPORT_FAILED = "Submission failed. Please try again."
MSG_MEMBER_FAILED = "Registration failed. Please try again."
MSG_CACHE_FAILED = "Could not save locally. Please try again."


class Phase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Notice:
    """Transient message shown to the user; gone after NOTICE_SECONDS."""
    kind: str
    message: str
    expires_at: datetime

    def visible(self, now: datetime = None) -> bool:
        return (now or _utcnow()) < self.expires_at

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "expiresAt": self.expires_at.isoformat()}

    @classmethod
    def from_dict(cls, data: dict) -> "Notice":
        return cls(data["kind"], data["message"], datetime.fromisoformat(data["expiresAt"]))


def empty_fields(kind: RecordKind) -> dict:
    if kind is RecordKind.REPORT:
        return {"name": "", "college": "", "email": "", "category": DEFAULT_CATEGORY, "details": ""}
    return {"name": "", "college": "", "email": "", "whatsapp": "", "photo": None}


@dataclass(frozen=True)
class SubmissionState:
    kind: RecordKind
    phase: Phase = Phase.IDLE
    fields: dict = field(default_factory=dict)
    violations: tuple = ()
    record: Optional[dict] = None
    error: Optional[str] = None
    notice: Optional[Notice] = None
    saved_locally: bool = False
    preview_id: Optional[str] = None
    card: Optional[dict] = None

    @classmethod
    def start(cls, kind: RecordKind) -> "SubmissionState":
        return cls(kind=kind, fields=empty_fields(kind))

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.spec.singular,
            "phase": self.phase.value,
            "fields": dict(self.fields),
            "violations": list(self.violations),
            "record": self.record,
            "error": self.error,
            "notice": self.notice.to_dict() if self.notice else None,
            "savedLocally": self.saved_locally,
            "previewId": self.preview_id,
            "card": self.card,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SubmissionState":
        notice = data.get("notice")
        return cls(
            kind=RecordKind.from_name(data["kind"]),
            phase=Phase(data.get("phase", Phase.IDLE.value)),
            fields=dict(data.get("fields") or {}),
            violations=tuple(data.get("violations") or ()),
            record=data.get("record"),
            error=data.get("error"),
            notice=Notice.from_dict(notice) if notice else None,
            saved_locally=bool(data.get("savedLocally")),
            preview_id=data.get("previewId"),
            card=data.get("card"),
        )


def with_field(state: SubmissionState, name: str, value) -> SubmissionState:
    """Edit one form field; any finished attempt goes back to Idle."""
    if name not in state.fields:
        raise ValueError(f"unknown field for {state.kind.spec.singular}: {name!r}")
    if state.kind is RecordKind.REPORT and name == "details":
        value = clip_details(value)
    return replace(
        state,
        phase=Phase.IDLE,
        fields={**state.fields, name: value},
        violations=(),
        error=None,
    )


def attach_photo(state: SubmissionState, source: bytes, now: datetime = None, **limits) -> SubmissionState:
    """Normalize an uploaded photo into the member form."""
    if state.kind is not RecordKind.MEMBER:
        raise ValueError("only member submissions carry a photo")
    try:
        image = normalize_image(source, **limits)
    except ImageRejected as e:
        return replace(state, notice=_notice("error", e.message, now))
    return with_field(state, "photo", image.data_url)


def _notice(kind: str, message: str, now: datetime = None) -> Notice:
    return Notice(kind, message, (now or _utcnow()) + timedelta(seconds=NOTICE_SECONDS))


class SubmissionWorkflow:
    """Drives one submission through validate -> submit -> result."""

    def __init__(
        self,
        client: PortalClient,
        cache: LocalMemberCache = None,
        clock: Callable[[], datetime] = _utcnow,
        listener: Callable[[SubmissionState], None] = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else LocalMemberCache(Config.LOCAL_CACHE_PATH)
        self.clock = clock
        self.listener = listener

    def submit(self, state: SubmissionState) -> SubmissionState:
        now = self.clock()

        state = self._emit(replace(state, phase=Phase.VALIDATING, violations=(), error=None))
        errs = validate(state.kind, state.fields)
        if errs:
            return self._emit(replace(
                state,
                phase=Phase.INVALID,
                violations=tuple(errs),
                notice=_notice("error", " • ".join(errs), now),
            ))

        preview_id = identifiers.new_member_id(now) if state.kind is RecordKind.MEMBER else None
        state = self._emit(replace(state, phase=Phase.SUBMITTING, preview_id=preview_id))
        payload = self._payload(state)

        try:
            data = self.client.create(state.kind, payload)

        except ApiError as e:
            default = MSG_REPORT_FAILED if state.kind is RecordKind.REPORT else MSG_MEMBER_FAILED
            return self._failed(state, e.message or default, now)

        except TransportFailure as e:
            logger.warning("submit %s: %s", state.kind.spec.singular, e)
            if state.kind is RecordKind.MEMBER:
                return self._save_locally(state, payload, now)
            return self._failed(state, MSG_NETWORK, now)

        return self._succeeded(state, payload, data, now)

    # ------------------------------------------------------------------

    def _payload(self, state: SubmissionState) -> dict:
        return {name: state.fields.get(name) for name in state.kind.spec.fields}

    def _succeeded(self, state, payload, data, now) -> SubmissionState:
        kind = state.kind
        record = data.get(kind.spec.singular)

        if kind is RecordKind.REPORT:
            record = record or {"referenceId": identifiers.new_reference_id(now), **payload}
            message = f"Problem submitted! Reference: {record['referenceId']}"
            card = None
        else:
            record = record or {"memberId": state.preview_id, **payload}
            message = f"Welcome to the community! Member ID: {record['memberId']}"
            card = member_card(record, joined=now)

        return self._emit(replace(
            state,
            phase=Phase.SUCCEEDED,
            fields=empty_fields(kind),
            record=record,
            card=card,
            saved_locally=False,
            notice=_notice("success", message, now),
        ))

    def _failed(self, state, message, now) -> SubmissionState:
        return self._emit(replace(
            state,
            phase=Phase.FAILED,
            error=message,
            notice=_notice("error", message, now),
        ))

    def _save_locally(self, state, payload, now) -> SubmissionState:
        fallback = {
            "memberId": identifiers.new_member_id(now),
            **payload,
            "status": STATUS_PENDING_SYNC,
        }
        try:
            self.cache.add(fallback, created_at=isoformat_z(now))
        except OSError:
            logger.exception("could not save member %s locally", fallback["memberId"])
            return self._failed(state, MSG_CACHE_FAILED, now)

        return self._emit(replace(
            state,
            phase=Phase.SUCCEEDED,
            record=fallback,
            card=member_card(fallback, joined=now),
            saved_locally=True,
            notice=_notice("success", f"Saved locally. Member ID: {fallback['memberId']}", now),
        ))

    def _emit(self, state: SubmissionState) -> SubmissionState:
        if self.listener:
            self.listener(state)
        return state
