from typing import List, Optional

from wordspy.services.game.state import RoomState


class RoomStore:
    """Persistence for room snapshots.

    Backends only load and save whole ``RoomState`` objects; all game rules
    live in ``RoomService``. Saves are last-write-wins.
    """

    def get(self, room_id: str) -> Optional[RoomState]:
        raise NotImplementedError

    def save(self, room: RoomState) -> None:
        raise NotImplementedError

    def delete(self, room_id: str) -> None:
        raise NotImplementedError

    def exists(self, room_id: str) -> bool:
        return self.get(room_id) is not None

    def find_room_id_for_player(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def list_rooms(self, game_state: Optional[str] = None, limit: Optional[int] = None) -> List[RoomState]:
        """Rooms newest first, optionally filtered by state."""
        raise NotImplementedError
