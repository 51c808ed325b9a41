import asyncio
import json
import logging
import os
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import redis.asyncio as redis


router = APIRouter(tags=["streams"])
logger = logging.getLogger(__name__)


REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
redis_client = redis.from_url(REDIS_URL, decode_responses=True)


def channel_for(rid: str) -> str:
    return f"round:{rid}"


async def broadcast(rid: str, message: dict) -> None:
    """Publish a round update to all subscribers.

    A Redis outage must not fail the write that triggered the update, so
    connection errors are logged and dropped.
    """
    try:
        await redis_client.publish(channel_for(rid), json.dumps(message, default=str))
    except redis.ConnectionError:
        logger.warning("Could not publish update for round %s", rid, exc_info=True)


@router.websocket("/rounds/{rid}/stream")
async def round_stream(ws: WebSocket, rid: str) -> None:
    """Stream round updates via a Redis pub/sub channel."""
    await ws.accept()
    channel = channel_for(rid)
    try:
        async with redis_client.pubsub() as pubsub:
            await pubsub.subscribe(channel)

            async def sender() -> None:
                try:
                    async for msg in pubsub.listen():
                        if msg.get("type") == "message":
                            await ws.send_json(json.loads(msg["data"]))
                except redis.ConnectionError:
                    await ws.close()

            send_task = asyncio.create_task(sender())
            try:
                while True:
                    await ws.receive_text()
            except WebSocketDisconnect:
                pass
            finally:
                send_task.cancel()
                with suppress(asyncio.CancelledError):
                    await send_task
                await pubsub.unsubscribe(channel)
    except redis.ConnectionError:
        logger.warning("Redis unavailable; closing stream for round %s", rid)
        await ws.close()
