# studentz/routes/pages.py
from flask import Blueprint, abort, render_template

from ..domain import RecordKind, member_card
from ..services import store_for

main = Blueprint("main", __name__)


@main.route("/members/<member_id>/card")
def member_card_page(member_id):
    member = store_for(RecordKind.MEMBER).get(member_id.strip().upper())
    if member is None:
        abort(404)
    card = member_card(member.to_dict(), joined=member.created_at)
    return render_template("card.html", card=card)
