"""Grace period for players whose socket dropped.

A disconnected player keeps their seat for ``DISCONNECT_GRACE_SEC``; if they
re-subscribe before the deadline the pending removal is cancelled, otherwise
they leave the room as if they had asked to.
"""

import time
from contextlib import nullcontext
from typing import Dict, Tuple

from flask import has_app_context

from wordspy import socketio
from wordspy import realtime

_leave_deadline: Dict[Tuple[str, str], float] = {}


def schedule_leave(app, room_id: str, user_id: str) -> None:
    """Schedule removal of a disconnected player.

    - Removes at once in TESTING mode or when the grace period is 0
    - Only the latest deadline per (room, player) is honoured
    """
    delay = int(app.config.get('DISCONNECT_GRACE_SEC', 10))
    if app.config.get('TESTING') or delay <= 0:
        leave_now(app, room_id, user_id)
        return

    key = (room_id, user_id)
    deadline = time.time() + delay
    _leave_deadline[key] = deadline
    app.logger.info(f"[presence-wait] room={room_id} player={user_id} grace={delay}s")

    def _worker(expected_deadline: float):
        socketio.sleep(max(0.0, expected_deadline - time.time()))
        if _leave_deadline.get(key) != expected_deadline:
            app.logger.info(f"[presence-abort] room={room_id} player={user_id} reconnected")
            return
        _leave_deadline.pop(key, None)
        leave_now(app, room_id, user_id)

    socketio.start_background_task(_worker, deadline)


def cancel_leave(room_id: str, user_id: str) -> bool:
    return _leave_deadline.pop((room_id, user_id), None) is not None


def pending_leaves():
    return dict(_leave_deadline)


def leave_now(app, room_id: str, user_id: str) -> None:
    from wordspy.store import get_room_service

    # Background workers need their own context; handlers reuse the current one
    with (nullcontext() if has_app_context() else app.app_context()):
        service = get_room_service()
        if service.room_id_for_player(user_id) != room_id:
            # Already left or moved to another room
            return
        room = service.leave_room(user_id)
        app.logger.info(f"[presence-leave] room={room_id} player={user_id}")
        if room is None:
            realtime.broadcast_event(room_id, realtime.ROOM_DELETED)
        else:
            realtime.notify_room(room_id, realtime.PLAYER_LEFT, player_id=user_id)
