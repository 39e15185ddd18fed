import logging

from fastapi import APIRouter, Depends, HTTPException

from votebox.crud import login_admin
from votebox.routes import get_storage
from votebox.schemas import AdminLogin, AdminLoginResponse
from votebox.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(credentials: AdminLogin, storage: Storage = Depends(get_storage)):
    try:
        admin, error = login_admin(storage, credentials.username, credentials.password)
    except Exception:
        logger.exception("Error during admin login")
        raise HTTPException(status_code=500, detail="Login failed")

    if error:
        raise HTTPException(status_code=401, detail=error)
    # Never echo the stored password
    return {"message": "Login successful", "admin": {"id": admin.id, "username": admin.username}}
