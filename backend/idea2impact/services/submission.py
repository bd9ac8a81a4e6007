import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import pydantic

from idea2impact.core.errors import DeliveryError, ValidationError
from idea2impact.models.registration import Registration
from idea2impact.schemas import RegistrationSubmission
from idea2impact.services.notification import DeliveryReceipt, NotificationSender
from idea2impact.services.registration_store import RegistrationStore

logger = logging.getLogger(__name__)

class SubmissionState(str, Enum):
    RECEIVED = "received"
    PERSISTED = "persisted"
    NOTIFIED = "notified"
    COMPLETED = "completed"
    FAILED = "failed"

@dataclass
class SubmissionOutcome:
    registration: Registration
    receipt: DeliveryReceipt
    state: SubmissionState = SubmissionState.COMPLETED

def validate_submission(payload: Any) -> RegistrationSubmission:
    """Check the body against the form's field set before anything is stored"""
    if not isinstance(payload, Mapping):
        raise ValidationError(["body"], "Request body must be a JSON object")

    try:
        return RegistrationSubmission.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        fields = []
        for err in e.errors():
            loc = str(err["loc"][0]) if err["loc"] else "body"
            if loc not in fields:
                fields.append(loc)
        raise ValidationError(fields) from e

class SubmissionWorkflow:
    """
    Received -> Persisted -> Notified -> Completed, or Failed at any step.

    A stored record is never rolled back when the email fails: losing a
    registration is worse than missing a notification.
    """

    def __init__(self, store: RegistrationStore, sender: NotificationSender):
        self.store = store
        self.sender = sender
        self.state = SubmissionState.RECEIVED

    def submit(self, payload: Any) -> SubmissionOutcome:
        self.state = SubmissionState.RECEIVED
        try:
            submission = validate_submission(payload)
            logger.info(f"📩 New registration attempt: {submission.email}")

            registration = self.store.create(submission.to_fields())
            self.state = SubmissionState.PERSISTED

            receipt = self.sender.notify(registration)
            self.state = SubmissionState.NOTIFIED
        except DeliveryError as e:
            self.state = SubmissionState.FAILED
            if e.registration is None:
                e.registration = registration
            raise
        except Exception:
            self.state = SubmissionState.FAILED
            raise

        self.state = SubmissionState.COMPLETED
        logger.info(f"✅ Registration {registration.id} completed")
        return SubmissionOutcome(registration=registration, receipt=receipt)
