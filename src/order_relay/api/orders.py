"""Order submission endpoint."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from order_relay.api.session_middleware import get_session
from order_relay.services.orders import MailDeliveryError, OrderValidationError

if TYPE_CHECKING:
    from order_relay.containers import AppContainer

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/order")
async def submit_order(request: Request) -> JSONResponse:
    """Relay an order form from a logged-in user as email."""
    container: AppContainer = request.app.state.container
    identity = get_session(request).identity
    if identity is None:
        return _error(status.HTTP_401_UNAUTHORIZED, "Not logged in")

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(status.HTTP_400_BAD_REQUEST, "All fields are required")

    try:
        await container.order_service.submit(identity, payload)
    except OrderValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except MailDeliveryError:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send order")
    return JSONResponse({"success": True, "message": "Order received!"})


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)
