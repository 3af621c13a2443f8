"""Client side of the portal: API client, offline cache and the
submission state machine that the forms drive."""

from .api import PortalClient, ApiError
from .cache import LocalMemberCache
from .cards import card_from_entry, render_card
from .workflow import (
    Phase,
    Notice,
    SubmissionState,
    SubmissionWorkflow,
    with_field,
    attach_photo,
)
