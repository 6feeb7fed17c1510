"""Caller identity dependencies shared by the v1 routes."""

from typing import Annotated

from fastapi import Depends, Request

from api.dependencies.rate_limits import client_id_from_request

ANONYMOUS_SENDER = "anonymous"


def get_client_id(request: Request) -> str:
    return client_id_from_request(request)


def get_sender_id(request: Request) -> str:
    """Acting user from the X-User-ID header set by the auth proxy."""
    return request.headers.get("x-user-id") or ANONYMOUS_SENDER


ClientIdDep = Annotated[str, Depends(get_client_id)]
SenderIdDep = Annotated[str, Depends(get_sender_id)]
