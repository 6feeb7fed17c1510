from typing import Annotated, Optional

from fastapi import APIRouter, Query

from api.dependencies.requests import ClientIdDep, SenderIdDep
from infrastructure.services import MessageIngressDep
from modules.messaging import PageDirection, SendMessageRequest

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", status_code=201)
async def send_message(
    body: SendMessageRequest,
    ingress: MessageIngressDep,
    client_id: ClientIdDep,
    sender_id: SenderIdDep,
):
    """Post a message to a channel.

    Responds 400 when channelId or content is missing, 429 with
    ``retryAfter`` when the client is over its allowance.
    """
    message = await ingress.send_message(body, client_id=client_id, sender_id=sender_id)
    return {"message": message.model_dump(mode="json", by_alias=True)}


@router.get("")
async def list_messages(
    ingress: MessageIngressDep,
    client_id: ClientIdDep,
    channel_id: Annotated[Optional[str], Query(alias="channelId")] = None,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
    direction: str = PageDirection.BEFORE.value,
):
    """Page through a channel's messages using the ``nextCursor`` returned."""
    page = await ingress.list_messages(
        channel_id,
        client_id=client_id,
        limit=limit,
        cursor=cursor,
        direction=direction,
    )
    return page.to_response()
