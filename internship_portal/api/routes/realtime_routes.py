"""
Realtime Routes

WS /ws - Receive change hints (newInternship, updatedInternship,
         newApplication, updatedApplication, employerApproved)
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from internship_portal.services.notifier import get_notifier

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws")
async def events(websocket: WebSocket):
    notifier = get_notifier()
    await notifier.connect(websocket)
    try:
        # Incoming messages are ignored; the loop only detects disconnects
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        notifier.disconnect(websocket)
