# studentz/routes/api.py
from flask import Blueprint, current_app, request

from ..domain import RecordKind
from ..errors.exceptions import DuplicateIdentifier, PayloadTooLarge, StoreUnavailable, ValidationFailure
from ..http import api_ok, api_error
from ..models import utcnow, isoformat_z
from ..services import submit_record, list_records

api = Blueprint("api", __name__)


@api.before_request
def _guard_payload_size():
    limit = current_app.config.get("MAX_CONTENT_LENGTH")
    if limit and request.content_length and request.content_length > limit:
        raise PayloadTooLarge()


# ==========================================
# Health
# ==========================================
@api.route("/health", methods=["GET"])
def health():
    return api_ok({"ok": True, "time": isoformat_z(utcnow())})


# ==========================================
# Shared create / list
# ==========================================
def _create(kind: RecordKind):
    data = request.get_json(silent=True) or {}

    try:
        record = submit_record(kind, data)

    except ValidationFailure as e:
        return api_error(400, str(e))

    except DuplicateIdentifier as e:
        current_app.logger.warning("duplicate %s %s", kind.spec.id_label, e.identifier)
        return api_error(500, str(e))

    except StoreUnavailable as e:
        current_app.logger.warning("create %s: %s", kind.spec.singular, e)
        return api_error(503, str(e))

    except Exception:
        current_app.logger.exception("create %s failed", kind.spec.singular)
        return api_error(500, "Server error")

    return api_ok({"ok": True, kind.spec.singular: record.to_dict()}, status=201)


def _list(kind: RecordKind):
    try:
        records = list_records(kind, request.args.get("limit"))
    except StoreUnavailable as e:
        current_app.logger.warning("list %s: %s", kind.spec.plural, e)
        return api_error(503, str(e))
    except Exception:
        current_app.logger.exception("list %s failed", kind.spec.plural)
        return api_error(500, "Server error")

    return api_ok({
        "ok": True,
        "count": len(records),
        kind.spec.plural: [r.to_dict() for r in records],
    })


# ==========================================
# Reports
# ==========================================
@api.route("/reports", methods=["POST"])
def reports_create():
    return _create(RecordKind.REPORT)


@api.route("/reports", methods=["GET"])
def reports_list():
    return _list(RecordKind.REPORT)


# ==========================================
# Members
# ==========================================
@api.route("/members", methods=["POST"])
def members_create():
    return _create(RecordKind.MEMBER)


@api.route("/members", methods=["GET"])
def members_list():
    return _list(RecordKind.MEMBER)
