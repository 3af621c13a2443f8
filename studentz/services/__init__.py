"""Service layer (business logic).

Identifier minting, validation and image normalization have no Flask
dependency and are shared with the client package. The store adapter and
submission flow run inside an app context.
"""

from .identifiers import new_reference_id, new_member_id, REFERENCE_ID_PATTERN, MEMBER_ID_PATTERN
from .validation import validate, validate_report, validate_member, clip_details, missing_required
from .images import normalize_image, NormalizedImage
from .store import RecordStore, store_for, parse_limit
from .submission import submit_record, list_records
