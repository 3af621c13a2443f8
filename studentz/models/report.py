from ..extensions import db
from .base import TimestampMixin


# ==========================================
# Problem report
# ==========================================
class Report(TimestampMixin, db.Model):
    __tablename__ = "reports"

    id = db.Column(db.Integer, primary_key=True)

    # SB-XXXXX-XXXXX, minted before insert
    reference_id = db.Column(db.String(20), unique=True, nullable=False)

    name = db.Column(db.String(120), nullable=False)
    college = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=True)
    category = db.Column(db.String(40), nullable=True)
    details = db.Column(db.Text, nullable=False)

    @property
    def identifier(self) -> str:
        return self.reference_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "referenceId": self.reference_id,
            "name": self.name,
            "college": self.college,
            "email": self.email,
            "category": self.category,
            "details": self.details,
            **self.timestamps(),
        }
