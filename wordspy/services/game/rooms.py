"""Room lifecycle and game flow.

``RoomService`` is the one state machine for rooms, whichever store backs
it. Each operation loads a snapshot, validates, mutates and saves it back.
There is no guard across that sequence: two concurrent joins can both pass
the capacity and name checks before either save lands.
"""

import logging
import random
import string
import time
from typing import List, Optional, Tuple

from wordspy.errors import Forbidden, NotFound, RuleViolation
from . import engine, voting
from .state import FINISHED, PLAYING, WAITING, PlayerState, RoomState
from .topics import get_topic

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_NAME_LENGTH = 24
MAX_EMOTE_LENGTH = 16


def normalize_room_id(room_id) -> str:
    if not isinstance(room_id, str):
        return ''
    return room_id.strip().upper()


def clean_player_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise RuleViolation('Player name is required')
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise RuleViolation(f'Player name must be at most {MAX_NAME_LENGTH} characters')
    return name


class RoomService:
    def __init__(self, store, config=None, rng=None):
        self.store = store
        self.config = config or {}
        self.rng = rng or random
        # Rooms left implicitly by create/join: (room_id, room or None if deleted)
        self.vacated: List[Tuple[str, Optional[RoomState]]] = []

    def _int_setting(self, key, default):
        return int(self.config.get(key, default))

    # ---- lookups ----

    def get_room(self, room_id) -> RoomState:
        room = self.store.get(normalize_room_id(room_id))
        if room is None:
            raise NotFound('Room not found')
        return room

    def room_id_for_player(self, user_id) -> Optional[str]:
        return self.store.find_room_id_for_player(user_id)

    def list_open_rooms(self) -> List[RoomState]:
        limit = self._int_setting('OPEN_ROOMS_LIMIT', 50)
        now = time.time()
        open_rooms = []
        for room in self.store.list_rooms(game_state=WAITING, limit=limit):
            reason = self._dead_reason(room, now)
            if reason:
                logger.info(f"[prune] room={room.id} reason={reason}")
                self.store.delete(room.id)
                continue
            open_rooms.append(room)
        return open_rooms

    def prune_rooms(self) -> List[str]:
        now = time.time()
        removed = []
        for room in self.store.list_rooms():
            reason = self._dead_reason(room, now)
            if reason:
                logger.info(f"[prune] room={room.id} reason={reason}")
                self.store.delete(room.id)
                removed.append(room.id)
        return removed

    def _dead_reason(self, room, now) -> Optional[str]:
        if not room.players:
            return 'empty'
        if not room.has_player(room.host_id):
            return 'orphaned'
        stale_after = self._int_setting('STALE_ROOM_SEC', 3600)
        if now - room.created_at > stale_after and len(room.players) < 2:
            return 'stale'
        return None

    # ---- lifecycle ----

    def generate_room_id(self) -> str:
        length = self._int_setting('ROOM_CODE_LENGTH', 6)
        while True:
            code = ''.join(self.rng.choice(CODE_ALPHABET) for _ in range(length))
            if not self.store.exists(code):
                return code

    def create_room(self, host_id, host_name) -> RoomState:
        name = clean_player_name(host_name)
        self._leave_previous_room(host_id)
        room = RoomState(
            id=self.generate_room_id(),
            host_id=host_id,
            players=[PlayerState(id=host_id, name=name, is_host=True)],
        )
        self.store.save(room)
        logger.info(f"[create] room={room.id} host={host_id}")
        return room

    def join_room(self, room_id, user_id, player_name) -> RoomState:
        room = self.get_room(room_id)
        if room.has_player(user_id):
            return room
        if room.game_state != WAITING:
            raise RuleViolation('Game already started')
        if not room.players:
            self.store.delete(room.id)
            raise NotFound('Room not found')
        if len(room.players) >= self._int_setting('MAX_PLAYERS', 8):
            raise RuleViolation('Room is full')
        name = clean_player_name(player_name)
        if any(p.name.strip().lower() == name.lower() for p in room.players):
            raise RuleViolation('That name is already taken in this room')

        self._leave_previous_room(user_id, keep=room.id)
        room.players.append(PlayerState(id=user_id, name=name))
        self.store.save(room)
        logger.info(f"[join] room={room.id} player={user_id} players={len(room.players)}")
        return room

    def _leave_previous_room(self, user_id, keep=None) -> None:
        previous = self.store.find_room_id_for_player(user_id)
        if previous and previous != keep:
            self.vacated.append((previous, self.leave_room(user_id)))

    def leave_room(self, user_id) -> Optional[RoomState]:
        """Remove the player from their room; None when the room is gone or they were not seated."""
        room_id = self.store.find_room_id_for_player(user_id)
        if not room_id:
            return None
        room = self.store.get(room_id)
        if room is None:
            return None
        player = room.find_player(user_id)
        if player is None:
            return None

        room.players.remove(player)
        if not room.players:
            self.store.delete(room.id)
            logger.info(f"[leave] room={room.id} player={user_id} deleted empty room")
            return None

        if player.is_host or room.host_id == user_id:
            successor = room.players[0]
            successor.is_host = True
            room.host_id = successor.id
            logger.info(f"[leave] room={room.id} host reassigned {user_id} -> {successor.id}")

        if room.game_state == PLAYING:
            self._drop_from_game(room, player)

        self.store.save(room)
        logger.info(f"[leave] room={room.id} player={user_id} players={len(room.players)}")
        return room

    def _drop_from_game(self, room, player) -> None:
        if not room.has_spun(player) and player.id in room.player_order:
            pos = room.player_order.index(player.id)
            del room.player_order[pos]
            if pos < len(room.spin_order):
                del room.spin_order[pos]
            room.total_spins = len(room.player_order)
            for idx, pid in enumerate(room.player_order):
                seated = room.find_player(pid)
                if seated:
                    seated.player_index = idx + 1
        in_tie_break = room.voting_phase and bool(room.tied_players)
        voting.discard_player(room, player.id)

        outcome = voting.decide_outcome(room)
        if outcome:
            room.outcome = outcome
            room.game_state = FINISHED
            room.voting_phase = False
            room.tied_players = []
            return
        if in_tie_break and len(room.tied_players) <= 1:
            result = voting.settle_tie_break(room)
            logger.info(f"[voting] room={room.id} tie-break settled by leave eliminated={result.eliminated}")
            return
        if room.voting_phase and voting.all_voted(room):
            voting.resolve_round(room)

    def set_ready(self, room_id, user_id, is_ready) -> RoomState:
        room = self.get_room(room_id)
        player = self._require_member(room, user_id)
        if room.game_state != WAITING:
            raise RuleViolation('Game already started')
        player.is_ready = bool(is_ready)
        self.store.save(room)
        return room

    def transfer_host(self, room_id, user_id, new_host_id) -> RoomState:
        room = self.get_room(room_id)
        self._require_host(room, user_id, 'Only the host can transfer host')
        if room.find_player(new_host_id) is None:
            raise NotFound('Player not found')
        for p in room.players:
            p.is_host = p.id == new_host_id
        room.host_id = new_host_id
        self.store.save(room)
        logger.info(f"[transfer-host] room={room.id} {user_id} -> {new_host_id}")
        return room

    def _require_member(self, room, user_id) -> PlayerState:
        player = room.find_player(user_id)
        if player is None:
            raise Forbidden('You are not in this room')
        return player

    def _require_host(self, room, user_id, message='Only the host can do that') -> PlayerState:
        player = self._require_member(room, user_id)
        if room.host_id != user_id:
            raise Forbidden(message)
        return player

    # ---- game flow ----

    def start_game(self, room_id, user_id, topic_id, game_mode) -> RoomState:
        room = self.get_room(room_id)
        self._require_host(room, user_id, 'Only the host can start the game')
        if room.game_state != WAITING:
            raise RuleViolation('Game already started')
        mode = engine.normalize_mode(game_mode)
        if mode is None:
            raise RuleViolation('Unknown game mode')
        topic = get_topic(topic_id)
        if topic is None:
            raise RuleViolation('Unknown topic')
        needed = engine.min_players(mode)
        if len(room.players) < needed:
            raise RuleViolation(f'{mode} mode needs at least {needed} players')
        if self.config.get('REQUIRE_ALL_READY') and any(
            not p.is_ready for p in room.players if p.id != room.host_id
        ):
            raise RuleViolation('All players must be ready')

        words = topic['words']
        secret = self.rng.choice(words)
        similar = None
        if engine.TAG_SIMILAR in engine.decoy_tags(mode):
            similar = engine.find_similar_word(words, secret, self.rng)
        spin_order = engine.build_spin_order(mode, len(room.players), self.rng)
        player_order = engine.shuffle([p.id for p in room.players], self.rng)

        for idx, pid in enumerate(player_order):
            p = room.find_player(pid)
            p.player_index = idx + 1
            p.word_type = spin_order[idx]
            p.word = engine.word_for_tag(spin_order[idx], secret, similar)
            p.is_eliminated = False

        room.game_state = PLAYING
        room.topic = topic_id.strip().lower()
        room.game_mode = mode
        room.game_word = secret
        room.similar_word = similar
        room.spin_order = spin_order
        room.player_order = player_order
        room.current_spin = 0
        room.total_spins = len(player_order)
        room.voting_phase = False
        room.voting_round = 1
        room.votes = {}
        room.tied_players = []
        room.eliminated_player = None
        room.wrong_elimination = False
        room.outcome = None
        self.store.save(room)
        logger.info(f"[start] room={room.id} mode={mode} topic={room.topic} players={len(player_order)}")
        return room

    def spin(self, room_id, user_id):
        """Reveal the caller's word; only the player whose turn it is may spin."""
        room = self.get_room(room_id)
        player = self._require_member(room, user_id)
        if room.game_state != PLAYING:
            raise RuleViolation('Game is not in progress')
        if room.spins_done:
            raise RuleViolation('Every player has already spun')
        if room.current_spinner_id != user_id:
            raise RuleViolation('It is not your turn to spin')

        reveal = {
            'word': player.word,
            'is_impostor': player.word_type == engine.TAG_IMPOSTOR,
            'player_index': player.player_index,
        }
        room.current_spin += 1
        self.store.save(room)
        return room, reveal

    def start_voting(self, room_id, user_id) -> RoomState:
        room = self.get_room(room_id)
        self._require_host(room, user_id, 'Only the host can start voting')
        if room.game_state != PLAYING:
            raise RuleViolation('Game is not in progress')
        if not room.spins_done:
            raise RuleViolation('Not every player has spun yet')
        if room.voting_phase:
            raise RuleViolation('Voting is already in progress')
        voting.open_voting(room)
        self.store.save(room)
        logger.info(f"[voting] room={room.id} opened")
        return room

    def cast_vote(self, room_id, voter_id, target_id):
        """Record a vote; resolves the round once every active player has voted."""
        room = self.get_room(room_id)
        voting.cast_vote(room, voter_id, target_id)
        result = None
        if voting.all_voted(room):
            result = voting.resolve_round(room)
            if result.is_tie:
                logger.info(f"[voting] room={room.id} tie {result.tied_players} -> round {room.voting_round}")
            else:
                logger.info(f"[voting] room={room.id} eliminated={result.eliminated} outcome={room.outcome}")
        self.store.save(room)
        return room, result

    def add_emote(self, room_id, user_id, emote) -> RoomState:
        room = self.get_room(room_id)
        player = self._require_member(room, user_id)
        if not isinstance(emote, str) or not emote.strip() or len(emote.strip()) > MAX_EMOTE_LENGTH:
            raise RuleViolation('Invalid emote')
        room.emotes.append({
            'player_id': player.player_index or room.players.index(player) + 1,
            'user_id': user_id,
            'emote': emote.strip(),
            'timestamp': int(time.time() * 1000),
        })
        limit = self._int_setting('EMOTE_HISTORY_LIMIT', 20)
        room.emotes = room.emotes[-limit:]
        self.store.save(room)
        return room

    def restart(self, room_id, user_id) -> RoomState:
        """Send a playing or finished room back to the lobby."""
        room = self.get_room(room_id)
        self._require_host(room, user_id, 'Only the host can restart the game')
        if room.game_state == WAITING:
            raise RuleViolation('Game has not started')
        for p in room.players:
            p.is_ready = False
            p.is_eliminated = False
            p.player_index = None
            p.word = None
            p.word_type = None
        room.game_state = WAITING
        room.topic = None
        room.game_mode = None
        room.game_word = None
        room.similar_word = None
        room.spin_order = []
        room.player_order = []
        room.current_spin = 0
        room.total_spins = 0
        room.voting_phase = False
        room.voting_round = 1
        room.votes = {}
        room.tied_players = []
        room.eliminated_player = None
        room.wrong_elimination = False
        room.outcome = None
        self.store.save(room)
        logger.info(f"[restart] room={room.id}")
        return room
