"""Room change signals over Socket.IO.

Events carry only ids; every event tells subscribed clients to refetch the
room. Emits are fire-and-forget: a failure is logged and clients catch up
through polling.
"""

from flask import current_app

from wordspy import socketio

NAMESPACE = '/ws'

ROOM_UPDATED = 'room-updated'
ROOM_DELETED = 'room-deleted'
PLAYER_JOINED = 'player-joined'
PLAYER_LEFT = 'player-left'
PLAYER_READY = 'player-ready'
GAME_STARTED = 'game-started'
PLAYER_SPUN = 'player-spun'
VOTING_STARTED = 'voting-started'
VOTE_CAST = 'vote-cast'
EMOTE_SENT = 'emote-sent'
HOST_TRANSFERRED = 'host-transferred'
GAME_RESTARTED = 'game-restarted'


def channel_for(room_id: str) -> str:
    return f"room:{room_id.strip().upper()}"


def broadcast_event(room_id: str, event_type: str, **fields) -> None:
    payload = {'type': event_type, 'room_id': room_id}
    payload.update(fields)
    try:
        socketio.emit(event_type, payload, to=channel_for(room_id), namespace=NAMESPACE)
    except Exception as exc:
        current_app.logger.warning(f"[broadcast] failed to send {event_type} to room={room_id}: {exc}")


def notify_room(room_id: str, event_type: str = None, **fields) -> None:
    """Send the action-specific event (if any) followed by the generic refresh signal."""
    if event_type and event_type != ROOM_UPDATED:
        broadcast_event(room_id, event_type, **fields)
    broadcast_event(room_id, ROOM_UPDATED)
