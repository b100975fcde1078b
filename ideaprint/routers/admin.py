from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional
import hmac
from ideaprint.deps import get_store
from ideaprint.services import auth
from ideaprint.services.store import IdeaStore

router = APIRouter()

SESSION_COOKIE = "admin-session"

class AdminLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

@router.post("/login")
def admin_login(payload: AdminLogin):
    if not payload.username or not payload.password:
        return JSONResponse(status_code=400, content={"error": "Username and password are required"})
    if not auth.validate_admin(payload.username, payload.password):
        return JSONResponse(status_code=401, content={"error": "Invalid credentials"})
    response = JSONResponse(status_code=200, content={"success": True})
    response.set_cookie(SESSION_COOKIE, auth.admin_session_token(), httponly=True,
                        max_age=60 * 60 * 24, path="/", samesite="lax")
    return response

@router.get("/diagnostics")
def diagnostics(check_user: Optional[str] = None, store: IdeaStore = Depends(get_store),
                admin_session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE)):
    if not admin_session or not hmac.compare_digest(admin_session.encode(), auth.admin_session_token().encode()):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    report = {"connection": store.check_connection(), "tables": store.verify_tables()}
    if check_user:
        report["permissions"] = store.check_permissions(check_user)
    return report
