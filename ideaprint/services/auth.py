import hmac
import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx

from ideaprint.config import settings

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT = "/dashboard"


class AuthExchangeError(RuntimeError):
    pass


def safe_redirect(target: Optional[str]) -> str:
    """Same-origin path to send the browser to after the callback."""
    if not target:
        return DEFAULT_REDIRECT
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith("/") or target.startswith("//"):
        return DEFAULT_REDIRECT
    return target


def exchange_code(code: str, client: Optional[httpx.Client] = None) -> Optional[str]:
    """Trade an OAuth code for an access token; None when no provider is configured."""
    if not settings.AUTH_TOKEN_URL:
        logger.info("no AUTH_TOKEN_URL configured, skipping code exchange")
        return None
    payload = {"grant_type": "authorization_code", "code": code}
    if settings.AUTH_CLIENT_ID:
        payload["client_id"] = settings.AUTH_CLIENT_ID
    own_client = client is None
    client = client or httpx.Client(timeout=10.0)
    try:
        resp = client.post(settings.AUTH_TOKEN_URL, data=payload)
        resp.raise_for_status()
        token = resp.json().get("access_token")
    except (httpx.HTTPError, ValueError) as e:
        raise AuthExchangeError(f"code exchange failed: {e}") from e
    finally:
        if own_client:
            client.close()
    if not token:
        raise AuthExchangeError("code exchange returned no access_token")
    return token


def validate_admin(username: str, password: str) -> bool:
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return False
    return (hmac.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
            and hmac.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode()))


def admin_session_token() -> str:
    """Cookie value proving a successful admin login."""
    key = (settings.ADMIN_PASSWORD or "").encode()
    return hmac.new(key, (settings.ADMIN_USERNAME or "").encode(), "sha256").hexdigest()
