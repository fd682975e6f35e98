import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from signclip.schemas.messages import CaptionMessageIn, SequenceMessageOut
from signclip.pipeline.orchestrator import resolve_caption, to_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def ws_endpoint(ws: WebSocket):
    """Caption stream: each caption message is answered with a sign sequence."""
    await ws.accept()
    logger.info("WebSocket connected")
    try:
        while True:
            raw = await ws.receive_text()
            try:
                data = json.loads(raw)
            except ValueError:
                logger.warning("Non-JSON frame – skipping")
                continue
            msg_type = data.get("type") if isinstance(data, dict) else None

            if msg_type == "caption":
                try:
                    msg = CaptionMessageIn(**data)
                    result = resolve_caption(text=msg.text)
                    reply = SequenceMessageOut(
                        type="sequence", session=msg.session, ts=msg.ts, **to_response(result),
                    )
                    await ws.send_json(reply.model_dump())
                except ValidationError:
                    logger.warning("Malformed caption message – skipping")
                except Exception:
                    # Never let a single bad caption kill the connection
                    logger.exception("Error resolving caption – skipping")
            else:
                logger.debug("Ignoring message type %r", msg_type)

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
