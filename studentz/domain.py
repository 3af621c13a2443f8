# studentz/domain.py
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


REPORT_CATEGORIES = (
    "Academic",
    "Administration",
    "Campus Facilities",
    "Finance/Fees",
    "Wellbeing",
    "Other",
)
DEFAULT_CATEGORY = "Academic"

DETAILS_MAX_LENGTH = 1000

STATUS_ACTIVE = "Active Member"
STATUS_PENDING_SYNC = "Pending Sync"


@dataclass(frozen=True)
class KindSpec:
    """
    Everything that differs between a report and a membership submission.
    """
    singular: str
    plural: str
    id_key: str
    id_label: str
    fields: Tuple[str, ...]
    required: Tuple[str, ...]
    list_cap: int
    default_limit: int

    @property
    def required_message(self) -> str:
        names = list(self.required)
        return f"{', '.join(names[:-1])} and {names[-1]} are required"

    @property
    def duplicate_message(self) -> str:
        return f"Duplicate {self.id_label}, try again"


class RecordKind(Enum):
    REPORT = KindSpec(
        singular="report",
        plural="reports",
        id_key="referenceId",
        id_label="reference ID",
        fields=("name", "college", "email", "category", "details"),
        required=("name", "college", "details"),
        list_cap=100,
        default_limit=20,
    )
    MEMBER = KindSpec(
        singular="member",
        plural="members",
        id_key="memberId",
        id_label="member ID",
        fields=("name", "college", "email", "whatsapp", "photo"),
        required=("name", "college", "email", "whatsapp"),
        list_cap=200,
        default_limit=50,
    )

    @property
    def spec(self) -> KindSpec:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "RecordKind":
        for kind in cls:
            if kind.value.singular == name or kind.value.plural == name:
                return kind
        raise ValueError(f"unknown record kind: {name!r}")


def format_join_date(dt) -> str:
    """Indian short date, e.g. 5/3/2026"""
    return f"{dt.day}/{dt.month}/{dt.year}"


def member_card(member: dict, joined=None) -> dict:
    """Fields printed on the membership ID card."""
    return {
        "memberId": member.get("memberId"),
        "name": member.get("name"),
        "college": member.get("college"),
        "email": member.get("email"),
        "whatsapp": member.get("whatsapp"),
        "photo": member.get("photo"),
        "joinDate": format_join_date(joined) if joined else "",
        "status": member.get("status") or STATUS_ACTIVE,
    }
