from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from typing import Dict, Any, Optional

from wordspy.auth import load_identity_from_request
from wordspy.realtime import NAMESPACE, channel_for
from wordspy.services.game import presence


def handle_connect():
    cfg = current_app.config
    # Seat tracking trusts only the identity header sent with the handshake
    identity = load_identity_from_request(request)
    _sid_identity[_get_sid()] = identity.get_id() if identity else None
    # Sync hints for the client's polling fallback
    emit('connected', {
        'message': f'Connected to {NAMESPACE}',
        'poll_interval_ms': int(cfg.get('POLL_INTERVAL_MS', 2000)),
        'subscribe_timeout_ms': int(cfg.get('SUBSCRIBE_TIMEOUT_MS', 3000)),
    })


def handle_disconnect(*args):
    sid = _get_sid()
    _sid_identity.pop(sid, None)
    # If this socket was the last one tracking a seated player, start their grace period
    ctx = _sid_to_ctx.pop(sid, None)
    if not ctx:
        return
    _release(ctx, disconnected=True)


def handle_subscribe(data):
    room_id = ((data or {}).get('room_id') or '').strip().upper()
    claimed = (data or {}).get('user_id')
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    sid = _get_sid()
    user_id = _connection_user(sid)
    if claimed and claimed != user_id:
        current_app.logger.warning(f"[subscribe] sid={sid} claimed user={claimed} but connected as {user_id}")
        emit('error', {'message': 'user_id does not match this connection'})
        return
    channel = channel_for(room_id)
    join_room(channel)

    previous = _sid_to_ctx.get(sid)
    if previous and (previous.get('room_id'), previous.get('user_id')) != (room_id, user_id):
        _release(previous, disconnected=False)
    _sid_to_ctx[sid] = {'room_id': room_id, 'user_id': user_id}
    if user_id:
        key = (room_id, user_id)
        _socket_count[key] = _socket_count.get(key, 0) + 1
        if presence.cancel_leave(room_id, user_id):
            current_app.logger.info(f"[presence-resume] room={room_id} player={user_id}")
    emit('subscribed', {'room': channel, 'room_id': room_id})


def handle_unsubscribe(data):
    room_id = ((data or {}).get('room_id') or '').strip().upper()
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    channel = channel_for(room_id)
    leave_room(channel)
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('room_id') == room_id:
        _sid_to_ctx.pop(_get_sid(), None)
        _release(ctx, disconnected=False)
    emit('unsubscribed', {'room': channel, 'room_id': room_id})


def handle_ping(data=None):
    emit('pong', data or {})

# ---- Seated-player presence helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_socket_count: Dict[tuple, int] = {}
_sid_identity: Dict[str, Optional[str]] = {}

def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _connection_user(sid: str) -> Optional[str]:
    return _sid_identity.get(sid)

def _release(ctx: Dict[str, Any], disconnected: bool) -> None:
    user_id = ctx.get('user_id')
    room_id = ctx.get('room_id')
    if not user_id or not room_id:
        return
    key = (room_id, user_id)
    remaining = max(0, _socket_count.get(key, 0) - 1)
    if remaining:
        _socket_count[key] = remaining
        return
    _socket_count.pop(key, None)
    if disconnected:
        presence.schedule_leave(current_app._get_current_object(), room_id, user_id)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from wordspy import socketio

    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('subscribe', handle_subscribe, namespace=namespace)
        socketio.on_event('unsubscribe', handle_unsubscribe, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
