"""Firebase Cloud Messaging delivery.

Push is optional: without FIREBASE_* credentials every send is a logged no-op.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

import firebase_admin
from firebase_admin import credentials, messaging

from eventflow.config import settings

logger = logging.getLogger(__name__)

APP_NAME = "eventflow"
# send_each_for_multicast refuses larger batches
MULTICAST_LIMIT = 500

_app: Optional[firebase_admin.App] = None


@dataclass
class PushResult:
    success: int = 0
    failure: int = 0
    unregistered_tokens: list[str] = field(default_factory=list)


def is_configured() -> bool:
    return bool(settings.FIREBASE_PROJECT_ID and settings.FIREBASE_CLIENT_EMAIL and settings.FIREBASE_PRIVATE_KEY)


def _get_app() -> Optional[firebase_admin.App]:
    global _app
    if _app is not None:
        return _app
    if not is_configured():
        return None

    cert = credentials.Certificate({
        "type": "service_account",
        "project_id": settings.FIREBASE_PROJECT_ID,
        "client_email": settings.FIREBASE_CLIENT_EMAIL,
        # .env files usually carry the key with escaped newlines
        "private_key": settings.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    })
    _app = firebase_admin.initialize_app(cert, name=APP_NAME)
    logger.info("Firebase Admin SDK initialized for project %s", settings.FIREBASE_PROJECT_ID)
    return _app


def send_to_tokens(
    tokens: list[str],
    title: str,
    body: str,
    data: Optional[dict[str, str]] = None,
) -> PushResult:
    """Send one notification to several devices.

    Tokens are sent in batches of ``MULTICAST_LIMIT``. Raises
    ``firebase_admin.exceptions.FirebaseError`` when a batch is rejected and
    ``ValueError`` when the credentials cannot be loaded; per-token failures
    are reported in the result.
    """
    app = _get_app()
    if app is None:
        logger.debug("Firebase not configured, skipping push to %d device(s)", len(tokens))
        return PushResult()
    if not tokens:
        return PushResult()

    result = PushResult()
    for start in range(0, len(tokens), MULTICAST_LIMIT):
        batch = tokens[start:start + MULTICAST_LIMIT]
        message = messaging.MulticastMessage(
            tokens=batch,
            notification=messaging.Notification(title=title, body=body),
            data=data,
        )
        response = messaging.send_each_for_multicast(message, app=app)
        result.success += response.success_count
        result.failure += response.failure_count
        for token, send_response in zip(batch, response.responses):
            if not send_response.success and isinstance(send_response.exception, messaging.UnregisteredError):
                result.unregistered_tokens.append(token)
    logger.debug("Push sent: %d ok, %d failed", result.success, result.failure)
    return result
