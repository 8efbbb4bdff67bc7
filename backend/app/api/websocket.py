from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState
import logging
import asyncio
import uuid

from ..core.assistant import CookingAssistant, classify_intent
from ..core.config import get_settings
from ..services.cook_session import CookSession
from ..services.progress import describe, minute_announcement

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")


@router.websocket("/ws/{recipe_id}")
async def websocket_endpoint(ws: WebSocket, recipe_id: str):
    log.info("🔗 New WebSocket connection for %s", recipe_id)
    await ws.accept()

    store = ws.app.state.store
    timers = ws.app.state.timers
    recipe = ws.app.state.catalog.get(recipe_id)
    if recipe is None:
        log.error("❌ Unknown recipe %s", recipe_id)
        await ws.send_json({"error": f"Recipe '{recipe_id}' not found"})
        await ws.close()
        return

    settings = get_settings()
    observer_id = f"ws-{uuid.uuid4().hex[:8]}"

    async def tts(text: str):
        # Push to browser; client plays speech synthesis
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.send_json({"tts": text})
        else:
            log.warning("❌ WebSocket not connected, TTS message dropped")

    assistant = CookingAssistant(CookSession(store, recipe), tts)
    timers.attach(observer_id, recipe, announce=tts)
    log.info("✅ Observer %s attached", observer_id)

    async def push_state():
        last_payload = None
        last_minute = None
        while True:
            view = store.get(recipe_id)
            payload = describe(view, recipe)
            if payload != last_payload:
                await ws.send_json({"session": payload})
                last_payload = payload

            minute = view.step_remaining_seconds // 60 if view is not None and view.is_running else None
            if minute is not None and last_minute is not None and minute != last_minute:
                await ws.send_json({"announcement": minute_announcement(minute)})
            last_minute = minute

            await asyncio.sleep(settings.poll_interval_ms / 1000)

    async def handle_commands():
        while True:
            text = await ws.receive_text()
            intent = classify_intent(text)
            log.info("🎯 Classified intent: %s for text: '%s'", intent, text.strip())
            await assistant.handle(intent)

    pusher = asyncio.create_task(push_state())
    try:
        await assistant.reset()
        await handle_commands()
    except WebSocketDisconnect:
        log.info("👋 Client disconnected normally")
    except Exception as e:
        log.error(f"💥 WebSocket error: {e}")
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.send_json({"error": f"Server error: {str(e)}"})
            await ws.close()
    finally:
        pusher.cancel()
        await asyncio.gather(pusher, return_exceptions=True)
        timers.detach(observer_id)
        log.info("🛑 Observer %s detached", observer_id)
