from ..domain import STATUS_ACTIVE
from ..extensions import db
from .base import TimestampMixin


# ==========================================
# Community member
# ==========================================
class Member(TimestampMixin, db.Model):
    __tablename__ = "members"

    id = db.Column(db.Integer, primary_key=True)

    # SB<year><6 chars>
    member_id = db.Column(db.String(16), unique=True, nullable=False)

    name = db.Column(db.String(120), nullable=False)
    college = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    whatsapp = db.Column(db.String(30), nullable=False)

    # JPEG data URL
    photo = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)

    @property
    def identifier(self) -> str:
        return self.member_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "memberId": self.member_id,
            "name": self.name,
            "college": self.college,
            "email": self.email,
            "whatsapp": self.whatsapp,
            "photo": self.photo,
            "status": self.status,
            **self.timestamps(),
        }
