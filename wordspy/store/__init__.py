"""Room registry backends behind one interface.

``ROOM_STORE`` picks the backend when the app is created; routes and socket
handlers reach the state machine through ``get_room_service()``.
"""

from flask import current_app

from .base import RoomStore
from .memory import MemoryRoomStore
from .sql import SqlRoomStore

STORES = {
    'memory': MemoryRoomStore,
    'sql': SqlRoomStore,
}


def init_room_store(app) -> RoomStore:
    kind = (app.config.get('ROOM_STORE') or 'sql').lower()
    if kind not in STORES:
        raise ValueError(f"Unknown ROOM_STORE '{kind}' (expected one of {sorted(STORES)})")
    store = STORES[kind]()
    app.extensions['room_store'] = store
    app.logger.info(f"[store] using {kind} room store")
    return store


def get_room_store() -> RoomStore:
    return current_app.extensions['room_store']


def get_room_service():
    from wordspy.services.game.rooms import RoomService
    return RoomService(get_room_store(), current_app.config)
