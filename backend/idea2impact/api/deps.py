from fastapi import Depends, Request

from idea2impact.core.config import Settings, settings
from idea2impact.services.notification import NotificationSender
from idea2impact.services.registration_store import RegistrationStore
from idea2impact.services.submission import SubmissionWorkflow

def get_settings() -> Settings:
    return settings

def get_store(request: Request) -> RegistrationStore:
    """Process-wide store, opened in the app lifespan"""
    return request.app.state.store

def get_sender(request: Request) -> NotificationSender:
    return request.app.state.sender

def get_workflow(
    store: RegistrationStore = Depends(get_store),
    sender: NotificationSender = Depends(get_sender),
) -> SubmissionWorkflow:
    """A fresh workflow per request"""
    return SubmissionWorkflow(store, sender)
