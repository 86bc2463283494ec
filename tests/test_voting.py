import pytest

from wordspy.errors import NotFound, RuleViolation
from wordspy.services.game import voting
from wordspy.services.game.state import FINISHED, PLAYING, PlayerState, RoomState


def make_room(*tags):
    """Room in its voting phase with one player per tag, ids p1..pN."""
    players = [
        PlayerState(id=f'p{i}', name=f'Player {i}', player_index=i, word_type=tag, word='x')
        for i, tag in enumerate(tags, start=1)
    ]
    room = RoomState(
        id='ROOM01', host_id='p1', players=players, game_state=PLAYING,
        player_order=[p.id for p in players], current_spin=len(players), total_spins=len(players),
    )
    players[0].is_host = True
    voting.open_voting(room)
    return room


def vote_all(room, ballots):
    for voter, target in ballots.items():
        voting.cast_vote(room, voter, target)


def test_resolve_votes_tie_and_winner():
    tie = voting.resolve_votes({'A': 2, 'B': 2, 'C': 1})
    assert tie.is_tie
    assert tie.tied_players == ['A', 'B']
    assert tie.eliminated is None

    win = voting.resolve_votes({'A': 3, 'B': 1})
    assert not win.is_tie
    assert win.eliminated == 'A'
    assert win.max_votes == 3


def test_cast_vote_rejections():
    room = make_room('normal', 'normal', 'impostor')
    with pytest.raises(RuleViolation, match='yourself'):
        voting.cast_vote(room, 'p1', 'p1')
    with pytest.raises(NotFound):
        voting.cast_vote(room, 'p1', 'ghost')
    voting.cast_vote(room, 'p1', 'p3')
    with pytest.raises(RuleViolation, match='already voted'):
        voting.cast_vote(room, 'p1', 'p2')

    room.voting_phase = False
    with pytest.raises(RuleViolation, match='not open'):
        voting.cast_vote(room, 'p2', 'p3')


def test_eliminated_players_cannot_vote():
    room = make_room('normal', 'normal', 'normal', 'impostor')
    room.players[1].is_eliminated = True
    with pytest.raises(RuleViolation):
        voting.cast_vote(room, 'p2', 'p4')
    with pytest.raises(RuleViolation):
        voting.cast_vote(room, 'p1', 'p2')


def test_catching_the_impostor_ends_the_game():
    room = make_room('normal', 'normal', 'impostor')
    vote_all(room, {'p1': 'p3', 'p2': 'p3', 'p3': 'p1'})
    assert voting.all_voted(room)

    result = voting.resolve_round(room)
    assert result.eliminated == 'p3'
    assert room.eliminated_player['id'] == 'p3'
    assert room.eliminated_player['votes'] == 2
    assert not room.wrong_elimination
    assert room.outcome == voting.OUTCOME_PLAYERS
    assert room.game_state == FINISHED
    assert not room.voting_phase


def test_wrong_elimination_hands_win_to_decoys():
    room = make_room('normal', 'normal', 'impostor')
    vote_all(room, {'p1': 'p2', 'p2': 'p3', 'p3': 'p2'})
    voting.resolve_round(room)
    assert room.eliminated_player['id'] == 'p2'
    assert room.wrong_elimination
    # One impostor against one normal player left
    assert room.outcome == voting.OUTCOME_DECOYS
    assert room.game_state == FINISHED


def test_wrong_elimination_without_decision_keeps_playing():
    room = make_room('normal', 'normal', 'normal', 'normal', 'impostor')
    vote_all(room, {'p1': 'p2', 'p2': 'p1', 'p3': 'p2', 'p4': 'p2', 'p5': 'p2'})
    voting.resolve_round(room)
    assert room.wrong_elimination
    assert room.outcome is None
    assert room.game_state == PLAYING
    assert not room.voting_phase


def test_tie_break_restricts_candidates_not_voters():
    room = make_room('normal', 'normal', 'normal', 'impostor')
    vote_all(room, {'p1': 'p4', 'p2': 'p3', 'p3': 'p4', 'p4': 'p3'})
    result = voting.resolve_round(room)
    assert result.is_tie
    assert sorted(result.tied_players) == ['p3', 'p4']
    assert room.voting_round == 2
    assert room.votes == {}
    assert room.voting_phase

    with pytest.raises(RuleViolation, match='tied players'):
        voting.cast_vote(room, 'p1', 'p2')

    # Tied players vote too
    vote_all(room, {'p1': 'p4', 'p2': 'p4', 'p3': 'p4', 'p4': 'p3'})
    result = voting.resolve_round(room)
    assert result.eliminated == 'p4'
    assert room.outcome == voting.OUTCOME_PLAYERS
    assert room.tied_players == []


def test_decide_outcome_mixed_mode():
    room = make_room('normal', 'normal', 'normal', 'similar', 'impostor')
    assert voting.decide_outcome(room) is None
    room.players[4].is_eliminated = True
    assert voting.decide_outcome(room) is None
    room.players[0].is_eliminated = True
    # similar vs two normal players
    assert voting.decide_outcome(room) is None
    room.players[1].is_eliminated = True
    assert voting.decide_outcome(room) == voting.OUTCOME_DECOYS


def test_discard_player_drops_their_ballots():
    room = make_room('normal', 'normal', 'normal', 'impostor')
    vote_all(room, {'p1': 'p4', 'p2': 'p1', 'p4': 'p2'})
    room.tied_players = ['p1', 'p2']
    voting.discard_player(room, 'p1')
    assert room.votes == {'p4': 'p2'}
    assert room.tied_players == ['p2']


def test_settle_tie_break_with_one_tied_player_left():
    room = make_room('normal', 'normal', 'normal', 'normal', 'impostor')
    room.tied_players = ['p1', 'p2', 'p3']
    assert voting.settle_tie_break(room) is None

    room.tied_players = ['p5']
    room.votes = {'p1': 'p5'}
    result = voting.settle_tie_break(room)
    assert result.eliminated == 'p5'
    assert room.eliminated_player['votes'] == 1
    assert room.outcome == voting.OUTCOME_PLAYERS


def test_settle_tie_break_with_no_tied_players_restarts_round():
    room = make_room('normal', 'normal', 'normal', 'impostor')
    room.voting_round = 2
    room.votes = {'p1': 'p4'}
    room.tied_players = []
    result = voting.settle_tie_break(room)
    assert result.eliminated is None
    assert room.votes == {}
    assert room.voting_round == 3
    assert room.voting_phase
    # Every active player is a candidate again
    voting.cast_vote(room, 'p4', 'p1')
