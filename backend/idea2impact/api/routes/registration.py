from fastapi import APIRouter, Body, Depends
from typing import Any, Dict
import logging

from idea2impact.api.deps import get_settings, get_workflow
from idea2impact.api.responses import failure_response
from idea2impact.core.config import Settings
from idea2impact.core.errors import DeliveryError, PersistenceError, ValidationError
from idea2impact.schemas import SubmissionData, SubmissionResponse
from idea2impact.services.submission import SubmissionWorkflow

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/send-registration", response_model=SubmissionResponse)
def send_registration(
    payload: Dict[str, Any] = Body(...),
    workflow: SubmissionWorkflow = Depends(get_workflow),
    settings: Settings = Depends(get_settings),
):
    """
    Store a hackathon registration and email a notification about it.
    """
    expose = settings.expose_error_details

    try:
        outcome = workflow.submit(payload)

    except ValidationError as e:
        logger.warning(f"Registration rejected: {e}")
        return failure_response(
            400, e.user_message, error=e.kind, fields=e.fields, exc=e, expose_details=expose
        )

    except PersistenceError as e:
        logger.error(f"❌ Registration error: {e}", exc_info=True)
        return failure_response(500, e.user_message, error=e.kind, exc=e, expose_details=expose)

    except DeliveryError as e:
        # The record is kept; tell the caller which id it got
        registration_id = e.registration.id if e.registration is not None else None
        logger.error(f"❌ Notification error for {registration_id}: {e}", exc_info=True)
        return failure_response(
            500,
            e.user_message,
            error=e.kind,
            exc=e,
            expose_details=expose,
            id=registration_id,
            data={"registrationId": registration_id},
        )

    except Exception as e:
        logger.error(f"❌ Registration error: {e}", exc_info=True)
        return failure_response(
            500,
            "Internal Server Error during registration",
            error="InternalError",
            exc=e,
            expose_details=expose,
        )

    registration = outcome.registration
    return SubmissionResponse(
        success=True,
        message="Registration successful",
        id=registration.id,
        data=SubmissionData(
            registrationId=registration.id,
            emailMessageId=outcome.receipt.message_id,
        ),
    )
