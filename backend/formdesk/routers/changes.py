"""Change feed over WebSocket."""

import asyncio
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.services.auth import AuthService
from formdesk.services.change_feed import feed

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.websocket("/changes")
async def changes(
    websocket: WebSocket,
    token: str,
    tables: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Push {table, event, id, submission_id, user_id} for writes to the listed tables.

    Only changes to submissions the account may see are sent.
    """
    try:
        user = AuthService.user_from_token(db, token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    user_id = user.id
    role = user.role.value
    db.close()

    wanted = [t.strip() for t in tables.split(",") if t.strip()] if tables else None
    try:
        subscription = feed.subscribe(wanted, account_id=user_id, role=role)
    except ValueError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    logger.info("change_feed_connected", user_id=user_id, tables=sorted(subscription.tables))

    async def pump() -> None:
        while True:
            message = await subscription.get()
            await websocket.send_json(message)

    sender = asyncio.create_task(pump())
    try:
        # Client messages are ignored; receiving detects disconnects
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        feed.unsubscribe(subscription)
        logger.info("change_feed_disconnected", user_id=user_id)
