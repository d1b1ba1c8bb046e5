from typing import Optional

from fastapi import Request

from qrtag_admin.models.user import CurrentUser


def get_current_user(request: Request) -> CurrentUser:
    """Signed-in dashboard user from the x-user-id / x-user-role headers; both optional."""
    user_id = (request.headers.get("x-user-id") or "").strip() or None
    role = (request.headers.get("x-user-role") or "").strip() or None
    return CurrentUser(id=user_id, role=role)


def get_auth_token(request: Request) -> Optional[str]:
    """Caller's Authorization header, forwarded verbatim to the upstream API."""
    token = (request.headers.get("authorization") or "").strip()
    return token or None
