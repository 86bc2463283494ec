"""Voting rounds, tie-breaks and elimination.

Functions here mutate a ``RoomState`` in place and raise ``RuleViolation``
for rejected actions; persisting and broadcasting is the caller's job.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wordspy.errors import NotFound, RuleViolation
from .engine import DECOY_TAGS
from .state import FINISHED, PLAYING

OUTCOME_PLAYERS = 'players'
OUTCOME_DECOYS = 'decoys'


@dataclass
class VoteResult:
    eliminated: Optional[str] = None
    is_tie: bool = False
    tied_players: List[str] = field(default_factory=list)
    max_votes: int = 0

    def to_dict(self):
        return {
            'eliminated': self.eliminated,
            'is_tie': self.is_tie,
            'tied_players': list(self.tied_players),
            'max_votes': self.max_votes,
        }


def candidates(room) -> list:
    """Players who can receive votes this round (tied players during a tie-break)."""
    active = room.active_players
    if room.tied_players:
        tied = [p for p in active if p.id in room.tied_players]
        if tied:
            return tied
    return active


def open_voting(room) -> None:
    room.voting_phase = True
    room.voting_round = 1
    room.votes = {}
    room.tied_players = []
    room.eliminated_player = None
    room.wrong_elimination = False


def cast_vote(room, voter_id, target_id) -> None:
    if room.game_state != PLAYING or not room.voting_phase:
        raise RuleViolation('Voting is not open')
    voter = room.find_player(voter_id)
    target = room.find_player(target_id)
    if not voter or not target:
        raise NotFound('Player not found')
    if voter.is_eliminated or target.is_eliminated:
        raise RuleViolation('Eliminated players cannot vote or be voted for')
    if voter.id == target.id:
        raise RuleViolation('You cannot vote for yourself')
    if voter.id in room.votes:
        raise RuleViolation('You have already voted this round')
    if target.id not in {c.id for c in candidates(room)}:
        raise RuleViolation('Only tied players can be voted for in a tie-break')
    room.votes[voter.id] = target.id


def all_voted(room) -> bool:
    active = room.active_players
    return bool(active) and all(p.id in room.votes for p in active)


def tally(room) -> Dict[str, int]:
    counts = {c.id: 0 for c in candidates(room)}
    for target in room.votes.values():
        if target in counts:
            counts[target] += 1
    return counts


def resolve_votes(counts: Dict[str, int]) -> VoteResult:
    """Highest count is eliminated; several players at the maximum make a tie.

    >>> resolve_votes({'A': 3, 'B': 1}).eliminated
    'A'
    >>> resolve_votes({'A': 2, 'B': 2, 'C': 1}).tied_players
    ['A', 'B']
    """
    if not counts:
        return VoteResult()
    max_votes = max(counts.values())
    leaders = [pid for pid, n in counts.items() if n == max_votes]
    if len(leaders) > 1:
        return VoteResult(is_tie=True, tied_players=leaders, max_votes=max_votes)
    return VoteResult(eliminated=leaders[0], max_votes=max_votes)


def start_tie_break(room, tied_player_ids) -> None:
    room.votes = {}
    room.tied_players = list(tied_player_ids)
    room.voting_round += 1


def decide_outcome(room) -> Optional[str]:
    active = room.active_players
    decoys = [p for p in active if p.word_type in DECOY_TAGS]
    normals = [p for p in active if p.word_type not in DECOY_TAGS]
    if not decoys:
        return OUTCOME_PLAYERS
    if len(decoys) >= len(normals):
        return OUTCOME_DECOYS
    return None


def eliminate(room, player_id, votes: int = 0) -> None:
    player = room.find_player(player_id)
    player.is_eliminated = True
    room.eliminated_player = {
        'id': player.id,
        'name': player.name,
        'word_type': player.word_type,
        'votes': votes,
    }
    room.wrong_elimination = player.word_type not in DECOY_TAGS
    room.voting_phase = False
    room.tied_players = []
    outcome = decide_outcome(room)
    if outcome:
        room.outcome = outcome
        room.game_state = FINISHED


def resolve_round(room) -> VoteResult:
    """Close the round: eliminate the leader or open a tie-break among the tied."""
    result = resolve_votes(tally(room))
    if result.is_tie:
        start_tie_break(room, result.tied_players)
    elif result.eliminated:
        eliminate(room, result.eliminated, result.max_votes)
    return result


def discard_player(room, player_id) -> None:
    """Drop votes cast by or against a player who left mid-round."""
    room.votes = {
        voter: target for voter, target in room.votes.items()
        if voter != player_id and target != player_id
    }
    if player_id in room.tied_players:
        room.tied_players = [pid for pid in room.tied_players if pid != player_id]


def settle_tie_break(room) -> Optional[VoteResult]:
    """Close a tie-break that lost tied players; None while two or more remain.

    A lone remaining tied player is eliminated. With none left the round
    starts over with every active player as a candidate.
    """
    if len(room.tied_players) > 1:
        return None
    if room.tied_players:
        survivor = room.tied_players[0]
        votes = sum(1 for target in room.votes.values() if target == survivor)
        eliminate(room, survivor, votes)
        return VoteResult(eliminated=survivor, max_votes=votes)
    room.votes = {}
    room.voting_round += 1
    return VoteResult()
