"""WebSocket stream of the admin queue and alerts"""

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
import structlog

from app.database import SessionLocal
from app.api.auth import user_from_token

router = APIRouter()
logger = structlog.get_logger()


@router.websocket("/live")
async def live(websocket: WebSocket, token: str = Query(...)):
    """Send the current state on connect, then every queue update and alert"""
    # The socket can stay open for hours; only hold a connection for the lookup
    async with SessionLocal() as db:
        user = await user_from_token(token, db)
        user_id = user.id if user is not None else None

    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    runtime = websocket.app.state.runtime
    await websocket.accept()
    client = runtime.hub.connect()

    try:
        await websocket.send_json({
            "type": "queue",
            "orders": [order.model_dump(mode="json") for order in runtime.orders_feed.queue],
        })
        await websocket.send_json({
            "type": "waiter_calls",
            "calls": [call.model_dump(mode="json") for call in runtime.calls_feed.pending],
        })
        while True:
            event = await client.get()
            await websocket.send_json(event)
    except WebSocketDisconnect:
        logger.info("Live socket closed", user_id=user_id)
    finally:
        runtime.hub.disconnect(client)
