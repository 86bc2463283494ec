import json
import time

from wordspy import db
from wordspy.models import Room, RoomPlayer, GameState
from wordspy.services.game.state import PlayerState, RoomState
from .base import RoomStore


def _loads(text, default):
    if not text:
        return default
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return default


def _dumps(value):
    return json.dumps(value) if value is not None else None


class SqlRoomStore(RoomStore):
    """Rooms persisted across the rooms / room_players / game_states tables."""

    def get(self, room_id):
        # Background workers may have written since this session last looked
        row = db.session.get(Room, room_id, populate_existing=True)
        return self._to_state(row) if row else None

    def exists(self, room_id):
        return db.session.query(Room.id).filter_by(id=room_id).first() is not None

    def save(self, room):
        row = db.session.get(Room, room.id)
        if row is None:
            row = Room(id=room.id)
            db.session.add(row)
        row.host_id = room.host_id
        row.created_at = room.created_at
        row.game_state = room.game_state
        row.current_topic = room.topic
        row.game_word = room.game_word
        row.similar_word = room.similar_word
        row.game_mode = room.game_mode
        row.current_spin = room.current_spin
        row.total_spins = room.total_spins
        row.spin_order = _dumps(room.spin_order)
        row.player_order = _dumps(room.player_order)
        row.updated_at = time.time()

        existing = {rp.user_id: rp for rp in row.players}
        seated = set()
        for p in room.players:
            rp = existing.get(p.id)
            if rp is None:
                rp = RoomPlayer(user_id=p.id, created_at=p.joined_at)
                row.players.append(rp)
            rp.player_name = p.name
            rp.is_host = p.is_host
            rp.is_ready = p.is_ready
            rp.is_eliminated = p.is_eliminated
            rp.player_index = p.player_index
            seated.add(p.id)
        for user_id, rp in existing.items():
            if user_id not in seated:
                # delete-orphan cascade removes the row
                row.players.remove(rp)

        gs = row.game_state_row
        if gs is None:
            gs = GameState()
            row.game_state_row = gs
        gs.voting_phase = room.voting_phase
        gs.voting_round = room.voting_round
        gs.is_tie = bool(room.tied_players)
        gs.tied_players = _dumps(room.tied_players)
        gs.eliminated_player = _dumps(room.eliminated_player)
        gs.wrong_elimination = room.wrong_elimination
        gs.outcome = room.outcome
        gs.player_words = _dumps({
            p.id: {'word': p.word, 'type': p.word_type}
            for p in room.players if p.word is not None
        })
        gs.votes = _dumps(room.votes)
        gs.emotes = _dumps(room.emotes)
        gs.updated_at = row.updated_at

        db.session.commit()
        room.updated_at = row.updated_at

    def delete(self, room_id):
        row = db.session.get(Room, room_id)
        if row is not None:
            db.session.delete(row)
            db.session.commit()

    def find_room_id_for_player(self, user_id):
        rp = RoomPlayer.query.filter_by(user_id=user_id).order_by(RoomPlayer.id.desc()).first()
        return rp.room_id if rp else None

    def list_rooms(self, game_state=None, limit=None):
        query = Room.query
        if game_state is not None:
            query = query.filter_by(game_state=game_state)
        query = query.order_by(Room.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_state(row) for row in query.all()]

    def _to_state(self, row):
        gs = row.game_state_row
        words = _loads(gs.player_words, {}) if gs else {}
        players = []
        for rp in row.players:
            assigned = words.get(rp.user_id) or {}
            players.append(PlayerState(
                id=rp.user_id,
                name=rp.player_name,
                is_host=bool(rp.is_host),
                is_ready=bool(rp.is_ready),
                is_eliminated=bool(rp.is_eliminated),
                player_index=rp.player_index,
                word=assigned.get('word'),
                word_type=assigned.get('type'),
                joined_at=rp.created_at,
            ))
        room = RoomState(
            id=row.id,
            host_id=row.host_id,
            players=players,
            game_state=row.game_state,
            topic=row.current_topic,
            game_word=row.game_word,
            similar_word=row.similar_word,
            game_mode=row.game_mode,
            spin_order=_loads(row.spin_order, []),
            player_order=_loads(row.player_order, []),
            current_spin=row.current_spin or 0,
            total_spins=row.total_spins or 0,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
        if gs:
            room.voting_phase = bool(gs.voting_phase)
            room.voting_round = gs.voting_round or 1
            room.votes = _loads(gs.votes, {})
            room.tied_players = _loads(gs.tied_players, [])
            room.eliminated_player = _loads(gs.eliminated_player, None)
            room.wrong_elimination = bool(gs.wrong_elimination)
            room.outcome = gs.outcome
            room.emotes = _loads(gs.emotes, [])
        return room
