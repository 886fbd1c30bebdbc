# newsbubble/deps.py
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from .config import ADMIN_API_KEY, build_reasoner


def require_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    The auth gateway in front of the API verifies the session and forwards the
    user id. Requests without one never reach the engine.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def require_admin(x_api_key: Optional[str] = Header(default=None)) -> None:
    if not ADMIN_API_KEY:
        # Fail closed if the key was never set
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server misconfigured: ADMIN_API_KEY not set."
        )
    if x_api_key != ADMIN_API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def get_reasoner(request: Request):
    reasoner = getattr(request.app.state, "reasoner", None)
    if reasoner is None:
        reasoner = build_reasoner()
        request.app.state.reasoner = reasoner
    return reasoner
