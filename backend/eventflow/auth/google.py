"""Google Sign-In: verify an ID token issued to our web client."""
import logging
from dataclasses import dataclass
from typing import Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from eventflow.config import settings

logger = logging.getLogger(__name__)


@dataclass
class GoogleIdentity:
    email: str
    name: str
    email_verified: bool = False


def is_configured() -> bool:
    return bool(settings.GOOGLE_CLIENT_ID)


def verify_google_id_token(credential: str) -> Optional[GoogleIdentity]:
    """Return the identity in ``credential``, or None when Google rejects it."""
    if not is_configured():
        logger.error("Google login attempted but GOOGLE_CLIENT_ID is not configured")
        return None

    try:
        claims = id_token.verify_oauth2_token(credential, google_requests.Request(), settings.GOOGLE_CLIENT_ID)
    except ValueError as exc:
        logger.warning("Google ID token rejected: %s", exc)
        return None

    email = claims.get("email", "")
    return GoogleIdentity(
        email=email,
        name=claims.get("name") or email.split("@")[0] or "Usuário",
        email_verified=bool(claims.get("email_verified", False)),
    )
