"""Storage-neutral room snapshot.

Both room stores load into and save from these dataclasses, so the state
machine in ``rooms.py`` never touches a backend directly.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'


@dataclass
class PlayerState:
    id: str
    name: str
    is_host: bool = False
    is_ready: bool = False
    is_eliminated: bool = False
    player_index: Optional[int] = None
    word: Optional[str] = None
    word_type: Optional[str] = None
    joined_at: float = field(default_factory=time.time)


@dataclass
class RoomState:
    id: str
    host_id: str
    players: List[PlayerState] = field(default_factory=list)
    game_state: str = WAITING
    topic: Optional[str] = None
    game_word: Optional[str] = None
    similar_word: Optional[str] = None
    game_mode: Optional[str] = None
    spin_order: List[str] = field(default_factory=list)
    player_order: List[str] = field(default_factory=list)
    current_spin: int = 0
    total_spins: int = 0
    voting_phase: bool = False
    voting_round: int = 1
    votes: Dict[str, str] = field(default_factory=dict)  # voter id -> target id
    tied_players: List[str] = field(default_factory=list)
    eliminated_player: Optional[Dict[str, Any]] = None
    wrong_elimination: bool = False
    outcome: Optional[str] = None
    emotes: List[Dict[str, Any]] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def find_player(self, user_id) -> Optional[PlayerState]:
        for p in self.players:
            if p.id == user_id:
                return p
        return None

    def has_player(self, user_id) -> bool:
        return self.find_player(user_id) is not None

    @property
    def active_players(self) -> List[PlayerState]:
        return [p for p in self.players if not p.is_eliminated]

    @property
    def spins_done(self) -> bool:
        return self.total_spins > 0 and self.current_spin >= self.total_spins

    @property
    def current_spinner_id(self) -> Optional[str]:
        if self.game_state != PLAYING or self.spins_done:
            return None
        if 0 <= self.current_spin < len(self.player_order):
            return self.player_order[self.current_spin]
        return None

    def has_spun(self, player: PlayerState) -> bool:
        return player.player_index is not None and player.player_index <= self.current_spin

    def vote_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for target in self.votes.values():
            counts[target] = counts.get(target, 0) + 1
        return counts

    def to_dict(self, viewer_id=None):
        """Serialize for clients.

        While a game runs only the viewer's own word is included; once it is
        finished every word and the spin order are revealed.
        """
        revealed = self.game_state == FINISHED
        counts = self.vote_counts()
        players = []
        for p in self.players:
            pd = {
                'id': p.id,
                'name': p.name,
                'is_host': p.is_host,
                'is_ready': p.is_ready,
                'player_index': p.player_index,
                'has_voted': p.id in self.votes,
                'voted_for': self.votes.get(p.id),
                'votes': counts.get(p.id, 0),
                'is_eliminated': p.is_eliminated,
            }
            if revealed or (viewer_id is not None and p.id == viewer_id and self.has_spun(p)):
                pd['word'] = p.word
                pd['word_type'] = p.word_type if revealed else None
            players.append(pd)

        return {
            'id': self.id,
            'host_id': self.host_id,
            'players': players,
            'game_state': self.game_state,
            'topic': self.topic,
            'game_mode': self.game_mode,
            'game_word': self.game_word if revealed else None,
            'similar_word': self.similar_word if revealed else None,
            'spin_order': list(self.spin_order) if revealed else None,
            'player_order': list(self.player_order),
            'current_spin': self.current_spin,
            'total_spins': self.total_spins,
            'current_spinner_id': self.current_spinner_id,
            'voting_phase': self.voting_phase,
            'voting_round': self.voting_round,
            'is_tie': bool(self.tied_players),
            'tied_players': list(self.tied_players),
            'eliminated_player': self.eliminated_player,
            'wrong_elimination': self.wrong_elimination,
            'outcome': self.outcome,
            'emotes': list(self.emotes),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
