from typing import Optional

from fastapi import Request

from app.services.errors import ServiceError

USER_HEADER = "x-user-id"


def normalize_user_id(value: str) -> str:
    """Balances are keyed case-insensitively; 'u_007' and '7' name the same user."""
    raw = (value or "").strip()
    if raw.isdigit():
        return str(int(raw))
    if raw.startswith("u_") and raw[2:].isdigit():
        return str(int(raw[2:]))
    return raw.lower()


def optional_user_id(request: Request) -> Optional[str]:
    raw = request.headers.get(USER_HEADER) or ""
    return normalize_user_id(raw) if raw.strip() else None


def require_user_id_header(request: Request) -> str:
    user_id = optional_user_id(request)
    if user_id is None:
        raise ServiceError(
            status_code=401,
            code="UNAUTHORIZED",
            message="Missing or invalid user context.",
            details={"required_header": USER_HEADER},
        ).to_http_exception()
    return user_id
