from __future__ import annotations

import hmac

from fastapi import Header, HTTPException, Request, status

from ..core.config import settings
from ..middlewares import principal_ctx_var


def _unauthorized(detail: str = "Unauthorized") -> None:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def require_actor(
    request: Request,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    x_actor: str | None = Header(default=None, alias="X-Actor"),
) -> str:
    """Resolve who is performing a ledger write.

    Sessions and logins are handled upstream; here the API key gates access
    and the optional ``X-Actor`` header names the user the caller acts for.
    """

    api_key = settings.API_KEY
    if api_key:
        provided = (x_api_key or "").strip()
        if not provided or not hmac.compare_digest(api_key, provided):
            _unauthorized("Invalid API key" if provided else "Authorization required")
        subject = "api-key"
    else:
        subject = "anonymous"

    actor = (x_actor or "").strip()
    if actor:
        subject = f"{subject}:{actor}"
    _set_principal(request, subject)
    return subject
