from datetime import datetime, timezone

from ..extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_z(dt) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-10-19T08:30:00.123Z"""
    if dt is None:
        return None
    # SQLite hands naive datetimes back
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimestampMixin:
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def timestamps(self) -> dict:
        return {
            "createdAt": isoformat_z(self.created_at),
            "updatedAt": isoformat_z(self.updated_at),
        }
