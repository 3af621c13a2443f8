"""ORM models.

One module per record kind; shared timestamp columns live in `base.py`.
"""

from .base import utcnow, isoformat_z
from .report import Report
from .member import Member
