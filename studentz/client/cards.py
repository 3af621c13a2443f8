"""Printable membership cards outside the server.

Cards for members saved only in the local cache (status "Pending Sync") are
rendered here through the same `card.html` the server page uses.
"""

from datetime import datetime, timezone
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from ..domain import member_card

_env = Environment(
    loader=PackageLoader("studentz", "templates"),
    autoescape=select_autoescape(["html"]),
)


def parse_timestamp(value) -> Optional[datetime]:
    """ISO-8601 with or without a trailing Z; None when missing or unparsable."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def card_from_entry(entry: dict) -> dict:
    """Card for a local cache entry; the join date is its createdAt."""
    return member_card(entry, joined=parse_timestamp(entry.get("createdAt")))


def render_card(card: dict) -> str:
    return _env.get_template("card.html").render(card=card)
