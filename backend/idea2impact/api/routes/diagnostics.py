from fastapi import APIRouter, Depends
import logging

from idea2impact.api.deps import get_sender, get_settings
from idea2impact.api.responses import failure_response
from idea2impact.core.config import Settings
from idea2impact.core.errors import DeliveryError
from idea2impact.services.notification import NotificationSender

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/test-email")
def test_email(
    sender: NotificationSender = Depends(get_sender),
    settings: Settings = Depends(get_settings),
):
    """
    Verify the SMTP relay accepts our connection and credentials.
    No message is sent.
    """
    try:
        config = sender.verify()
    except DeliveryError as e:
        return failure_response(
            500,
            "SMTP verification failed",
            error=e.kind,
            exc=e,
            expose_details=settings.expose_error_details,
        )

    return {"success": True, "message": "SMTP connection verified", "config": config}
