import copy
import threading
import time
from typing import Dict, List, Optional

from wordspy.services.game.state import RoomState
from .base import RoomStore


class MemoryRoomStore(RoomStore):
    """Process-local registry. Rooms vanish on restart.

    Snapshots are deep-copied in and out so callers get the same
    read-modify-write behaviour as with the SQL store.
    """

    def __init__(self):
        self._rooms: Dict[str, RoomState] = {}
        self._player_rooms: Dict[str, str] = {}  # user id -> room id
        self._lock = threading.Lock()

    def get(self, room_id):
        with self._lock:
            room = self._rooms.get(room_id)
            return copy.deepcopy(room) if room else None

    def exists(self, room_id):
        with self._lock:
            return room_id in self._rooms

    def save(self, room):
        room.updated_at = time.time()
        with self._lock:
            previous = self._rooms.get(room.id)
            if previous:
                for p in previous.players:
                    if self._player_rooms.get(p.id) == room.id:
                        self._player_rooms.pop(p.id, None)
            self._rooms[room.id] = copy.deepcopy(room)
            for p in room.players:
                self._player_rooms[p.id] = room.id

    def delete(self, room_id):
        with self._lock:
            room = self._rooms.pop(room_id, None)
            if room:
                for p in room.players:
                    if self._player_rooms.get(p.id) == room_id:
                        self._player_rooms.pop(p.id, None)

    def find_room_id_for_player(self, user_id) -> Optional[str]:
        with self._lock:
            return self._player_rooms.get(user_id)

    def list_rooms(self, game_state=None, limit=None) -> List[RoomState]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if game_state is None or r.game_state == game_state]
            rooms.sort(key=lambda r: r.created_at, reverse=True)
            if limit is not None:
                rooms = rooms[:limit]
            return [copy.deepcopy(r) for r in rooms]
