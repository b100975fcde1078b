from fastapi import APIRouter
from fastapi.responses import RedirectResponse
from typing import Optional
import logging
from ideaprint.services import auth

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/callback")
def auth_callback(code: Optional[str] = None, redirect: Optional[str] = None):
    token = None
    if code:
        try:
            token = auth.exchange_code(code)
        except auth.AuthExchangeError as e:
            logger.warning("auth callback: %s", e)
    response = RedirectResponse(url=auth.safe_redirect(redirect), status_code=307)
    if token:
        response.set_cookie("session", token, httponly=True, samesite="lax")
    return response
