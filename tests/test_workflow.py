# tests/test_workflow.py
from datetime import datetime, timedelta, timezone

import pytest
import requests

from studentz.client import (
    LocalMemberCache,
    Phase,
    PortalClient,
    SubmissionState,
    SubmissionWorkflow,
    attach_photo,
    card_from_entry,
    render_card,
    with_field,
)
from studentz.domain import RecordKind
from studentz.services.identifiers import MEMBER_ID_PATTERN

from conftest import make_image

BASE = "http://portal.example.com"
NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def cache(tmp_path):
    return LocalMemberCache(str(tmp_path / "sb_members_v1.json"))


@pytest.fixture
def transitions():
    return []


@pytest.fixture
def workflow(cache, transitions):
    return SubmissionWorkflow(
        PortalClient(BASE, timeout=1),
        cache=cache,
        clock=lambda: NOW,
        listener=lambda s: transitions.append(s.phase),
    )


def fill(kind, **values):
    state = SubmissionState.start(kind)
    for name, value in values.items():
        state = with_field(state, name, value)
    return state


def member_form(**overrides):
    values = {
        "name": "Ananya Rao",
        "college": "ABC Institute",
        "email": "ananya@example.com",
        "whatsapp": "9876543210",
        "photo": "data:image/jpeg;base64,AAAA",
    }
    values.update(overrides)
    return fill(RecordKind.MEMBER, **values)


def report_form(**overrides):
    values = {"name": "Ananya Rao", "college": "ABC Institute", "details": "Leaking roof in block C"}
    values.update(overrides)
    return fill(RecordKind.REPORT, **values)


# ---------------------------------------------------------------------------
# reports
# ---------------------------------------------------------------------------

def test_report_success(workflow, transitions, requests_mock):
    requests_mock.post(
        f"{BASE}/api/reports",
        status_code=201,
        json={"ok": True, "report": {"referenceId": "SB-ABCDE-12345", "details": "Leaking roof in block C"}},
    )
    state = workflow.submit(report_form())

    assert state.phase is Phase.SUCCEEDED
    assert state.record["referenceId"] == "SB-ABCDE-12345"
    assert state.notice.message == "Problem submitted! Reference: SB-ABCDE-12345"
    assert state.fields["details"] == ""
    assert state.fields["category"] == "Academic"
    assert transitions == [Phase.VALIDATING, Phase.SUBMITTING, Phase.SUCCEEDED]


def test_report_invalid_never_hits_network(workflow, transitions, requests_mock):
    state = workflow.submit(report_form(name=" ", details=""))

    assert state.phase is Phase.INVALID
    assert state.violations == ("Name is required", "Please describe the problem")
    assert state.notice.message == "Name is required • Please describe the problem"
    assert requests_mock.call_count == 0
    assert transitions == [Phase.VALIDATING, Phase.INVALID]


def test_report_server_error_message(workflow, requests_mock):
    requests_mock.post(f"{BASE}/api/reports", status_code=500, json={"error": "Duplicate reference ID, try again"})
    state = workflow.submit(report_form())
    assert state.phase is Phase.FAILED
    assert state.error == "Duplicate reference ID, try again"


def test_report_error_without_body_uses_default(workflow, requests_mock):
    requests_mock.post(f"{BASE}/api/reports", status_code=500, text="<html>oops</html>")
    state = workflow.submit(report_form())
    assert state.error == "Submission failed. Please try again."


def test_report_network_failure_is_not_cached(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/reports", exc=requests.exceptions.ConnectionError)
    state = workflow.submit(report_form())

    assert state.phase is Phase.FAILED
    assert state.error == "Network error. Could not submit."
    assert cache.entries() == []


def test_details_are_clipped_on_input():
    state = with_field(SubmissionState.start(RecordKind.REPORT), "details", "z" * 1200)
    assert len(state.fields["details"]) == 1000


# ---------------------------------------------------------------------------
# members
# ---------------------------------------------------------------------------

def test_member_success_builds_card(workflow, requests_mock):
    requests_mock.post(
        f"{BASE}/api/members",
        status_code=201,
        json={"ok": True, "member": {
            "memberId": "SB2026SERVER", "name": "Ananya Rao", "college": "ABC Institute",
            "email": "ananya@example.com", "whatsapp": "9876543210", "status": "Active Member",
        }},
    )
    state = workflow.submit(member_form())

    assert state.phase is Phase.SUCCEEDED
    assert state.saved_locally is False
    assert state.card["memberId"] == "SB2026SERVER"
    assert state.card["joinDate"] == "19/10/2026"
    assert state.notice.message == "Welcome to the community! Member ID: SB2026SERVER"
    assert state.fields["photo"] is None


def test_member_success_without_record_uses_preview_id(workflow, requests_mock):
    requests_mock.post(f"{BASE}/api/members", status_code=201, json={"ok": True})
    state = workflow.submit(member_form())
    assert state.record["memberId"] == state.preview_id
    assert MEMBER_ID_PATTERN.match(state.preview_id)


def test_member_bad_phone_is_rejected_locally(workflow, requests_mock):
    state = workflow.submit(member_form(whatsapp="98765"))

    assert state.phase is Phase.INVALID
    assert state.violations == ("Please enter a valid 10-digit WhatsApp number",)
    assert requests_mock.call_count == 0


def test_member_offline_fallback(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/members", exc=requests.exceptions.ConnectionError)
    state = workflow.submit(member_form())

    assert state.phase is Phase.SUCCEEDED
    assert state.saved_locally is True
    assert state.record["status"] == "Pending Sync"
    assert MEMBER_ID_PATTERN.match(state.record["memberId"])
    assert state.notice.message == f"Saved locally. Member ID: {state.record['memberId']}"

    entries = cache.entries()
    assert len(entries) == 1
    assert entries[0]["memberId"] == state.record["memberId"]
    assert entries[0]["status"] == "Pending Sync"
    assert entries[0]["createdAt"] == "2026-10-19T09:00:00.000Z"


def test_member_timeout_triggers_fallback(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/members", exc=requests.exceptions.ReadTimeout)
    state = workflow.submit(member_form())
    assert state.saved_locally is True
    assert len(cache.entries()) == 1


def test_member_http_error_is_not_cached(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/members", status_code=400, json={"error": "name, college, email and whatsapp are required"})
    state = workflow.submit(member_form())
    assert state.phase is Phase.FAILED
    assert state.error == "name, college, email and whatsapp are required"
    assert cache.entries() == []


def test_member_cache_write_failure(workflow, cache, requests_mock, monkeypatch):
    requests_mock.post(f"{BASE}/api/members", exc=requests.exceptions.ConnectionError)

    def broken(*args, **kwargs):
        raise OSError("read-only")

    monkeypatch.setattr(cache, "add", broken)
    state = workflow.submit(member_form())
    assert state.phase is Phase.FAILED
    assert state.error == "Could not save locally. Please try again."


# ---------------------------------------------------------------------------
# state helpers
# ---------------------------------------------------------------------------

def test_editing_after_invalid_returns_to_idle(workflow):
    state = workflow.submit(member_form(name=""))
    assert state.phase is Phase.INVALID

    state = with_field(state, "name", "Ananya Rao")
    assert state.phase is Phase.IDLE
    assert state.violations == ()


def test_unknown_field():
    with pytest.raises(ValueError):
        with_field(SubmissionState.start(RecordKind.REPORT), "whatsapp", "9876543210")


def test_notice_auto_dismisses(workflow):
    state = workflow.submit(report_form(name=""))
    assert state.notice.visible(NOW + timedelta(seconds=4))
    assert not state.notice.visible(NOW + timedelta(seconds=5))


def test_state_round_trips_through_dict(workflow):
    state = workflow.submit(member_form(email="nope"))
    again = SubmissionState.from_dict(state.to_dict())
    assert again == state


def test_attach_photo_normalizes():
    state = attach_photo(SubmissionState.start(RecordKind.MEMBER), make_image((2000, 1000)))
    assert state.fields["photo"].startswith("data:image/jpeg;base64,")


def test_attach_photo_rejection_sets_notice():
    state = attach_photo(SubmissionState.start(RecordKind.MEMBER), b"garbage", now=NOW)
    assert state.fields["photo"] is None
    assert state.notice.kind == "error"
    assert state.notice.message == "Could not read image. Try another file."


def test_attach_photo_only_for_members():
    with pytest.raises(ValueError):
        attach_photo(SubmissionState.start(RecordKind.REPORT), make_image())


@pytest.mark.parametrize("error", [
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.TooManyRedirects,
])
def test_member_other_transport_errors_trigger_fallback(workflow, cache, requests_mock, error):
    requests_mock.post(f"{BASE}/api/members", exc=error)
    state = workflow.submit(member_form())
    assert state.phase is Phase.SUCCEEDED
    assert state.saved_locally is True
    assert len(cache.entries()) == 1


def test_member_store_unavailable_triggers_fallback(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/members", status_code=503, json={"error": "Store unavailable, try again"})
    state = workflow.submit(member_form())
    assert state.saved_locally is True
    assert cache.entries()[0]["status"] == "Pending Sync"


def test_report_store_unavailable_is_network_error(workflow, requests_mock):
    requests_mock.post(f"{BASE}/api/reports", status_code=503, json={"error": "Store unavailable, try again"})
    state = workflow.submit(report_form())
    assert state.phase is Phase.FAILED
    assert state.error == "Network error. Could not submit."


def test_attach_photo_with_too_many_pixels_sets_notice(monkeypatch):
    from PIL import Image

    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    state = attach_photo(SubmissionState.start(RecordKind.MEMBER), make_image((64, 48)), now=NOW)
    assert state.fields["photo"] is None
    assert state.notice.message == "Could not read image. Try another file."


# ---------------------------------------------------------------------------
# printable cards for offline members
# ---------------------------------------------------------------------------

def test_fallback_card_renders(workflow, requests_mock):
    requests_mock.post(f"{BASE}/api/members", exc=requests.exceptions.ConnectionError)
    state = workflow.submit(member_form())

    html = render_card(state.card)
    assert state.record["memberId"] in html
    assert "Pending Sync" in html
    assert "JOINED: 19/10/2026" in html


def test_card_from_cache_entry_uses_created_at(workflow, cache, requests_mock):
    requests_mock.post(f"{BASE}/api/members", exc=requests.exceptions.ConnectionError)
    workflow.submit(member_form())

    card = card_from_entry(cache.entries()[0])
    assert card["joinDate"] == "19/10/2026"
    assert card["status"] == "Pending Sync"
    assert card["name"] == "Ananya Rao"
    assert "+91 9876543210" in render_card(card)


def test_card_from_entry_without_timestamp():
    card = card_from_entry({"memberId": "SB2026ABCDEF", "name": "A", "createdAt": "not a date"})
    assert card["joinDate"] == ""
    assert card["status"] == "Active Member"
