"""Record store adapter over Flask-SQLAlchemy.

Keeps SQLAlchemy error types out of the submission workflow: callers only
ever see DuplicateIdentifier, StoreUnavailable or StoreFailure.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from ..domain import RecordKind
from ..errors.exceptions import DuplicateIdentifier, StoreFailure, StoreUnavailable
from ..extensions import db
from ..models import Member, Report


def parse_limit(raw, default: int) -> int:
    """Query-string limit; anything non-numeric falls back to `default`."""
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


class RecordStore:
    def __init__(self, model, key: str, cap: int, default_limit: int, duplicate_message: str):
        self.model = model
        self.key = key
        self.cap = cap
        self.default_limit = default_limit
        self.duplicate_message = duplicate_message

    def clamp(self, limit: int) -> int:
        return max(0, min(self.cap, limit))

    def exists(self, identifier: str) -> bool:
        column = getattr(self.model, self.key)
        return db.session.query(self.model.id).filter(column == identifier).first() is not None

    def insert(self, record):
        identifier = getattr(record, self.key, None)
        if not identifier:
            raise StoreFailure("record has no identifier")

        try:
            db.session.add(record)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if self.exists(identifier):
                raise DuplicateIdentifier(self.duplicate_message, identifier) from exc
            raise StoreFailure() from exc
        except OperationalError as exc:
            db.session.rollback()
            raise StoreUnavailable() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreFailure() from exc

        current_app.logger.info(
            "[store] inserted %s %s=%s", self.model.__tablename__, self.key, identifier
        )
        return record

    def list(self, limit: int = None):
        if limit is None:
            limit = self.default_limit
        limit = self.clamp(limit)
        if limit == 0:
            return []
        try:
            return (
                self.model.query
                .order_by(self.model.created_at.desc(), self.model.id.desc())
                .limit(limit)
                .all()
            )
        except OperationalError as exc:
            db.session.rollback()
            raise StoreUnavailable() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreFailure() from exc

    def get(self, identifier: str):
        column = getattr(self.model, self.key)
        return self.model.query.filter(column == identifier).first()


reports = RecordStore(
    Report,
    key="reference_id",
    cap=RecordKind.REPORT.spec.list_cap,
    default_limit=RecordKind.REPORT.spec.default_limit,
    duplicate_message=RecordKind.REPORT.spec.duplicate_message,
)

members = RecordStore(
    Member,
    key="member_id",
    cap=RecordKind.MEMBER.spec.list_cap,
    default_limit=RecordKind.MEMBER.spec.default_limit,
    duplicate_message=RecordKind.MEMBER.spec.duplicate_message,
)

_STORES = {
    RecordKind.REPORT: reports,
    RecordKind.MEMBER: members,
}


def store_for(kind: RecordKind) -> RecordStore:
    return _STORES[kind]
