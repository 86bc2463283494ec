from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from wordspy import realtime
from wordspy.errors import RuleViolation
from wordspy.services.game.topics import list_topics
from wordspy.store import get_room_service


rooms = Blueprint('rooms', __name__)


def _payload():
    return request.get_json(silent=True) or {}


def _required_str(data, key):
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RuleViolation(f'Missing {key}')
    return value.strip()


def _room_response(room, status=200, **extra):
    body = {'room': room.to_dict(viewer_id=current_user.get_id())}
    body.update(extra)
    return jsonify(body), status


def _announce_vacated(service):
    # Rooms the caller left implicitly by creating or joining another one
    for room_id, room in service.vacated:
        if room is None:
            realtime.broadcast_event(room_id, realtime.ROOM_DELETED)
        else:
            realtime.notify_room(room_id, realtime.PLAYER_LEFT, player_id=current_user.get_id())


@rooms.route('', methods=['POST'])
@login_required
def create_room():
    data = _payload()
    host_name = _required_str(data, 'host_name')
    service = get_room_service()
    room = service.create_room(current_user.get_id(), host_name)
    _announce_vacated(service)
    return _room_response(room, 201)


@rooms.route('', methods=['GET'])
def get_room():
    service = get_room_service()
    if request.args.get('list') == 'true':
        return jsonify({'rooms': [r.to_dict() for r in service.list_open_rooms()]})
    room_id = request.args.get('room_id')
    if not room_id:
        return jsonify({'error': 'Missing room_id'}), 400
    return _room_response(service.get_room(room_id))


@rooms.route('/topics', methods=['GET'])
def get_topics():
    return jsonify({'topics': list_topics()})


@rooms.route('/join', methods=['POST'])
@login_required
def join_room():
    data = _payload()
    room_id = _required_str(data, 'room_id')
    player_name = _required_str(data, 'player_name')
    service = get_room_service()
    room = service.join_room(room_id, current_user.get_id(), player_name)
    _announce_vacated(service)
    realtime.notify_room(room.id, realtime.PLAYER_JOINED, player_id=current_user.get_id())
    return _room_response(room)


@rooms.route('/leave', methods=['POST'])
@login_required
def leave_room():
    user_id = current_user.get_id()
    service = get_room_service()
    room_id = service.room_id_for_player(user_id)
    room = service.leave_room(user_id)
    if room is not None:
        realtime.notify_room(room.id, realtime.PLAYER_LEFT, player_id=user_id)
        return _room_response(room)
    if room_id:
        realtime.broadcast_event(room_id, realtime.ROOM_DELETED)
    return jsonify({'success': True})


@rooms.route('/ready', methods=['POST'])
@login_required
def set_ready():
    data = _payload()
    room_id = _required_str(data, 'room_id')
    is_ready = data.get('is_ready')
    if not isinstance(is_ready, bool):
        raise RuleViolation('Missing is_ready')
    room = get_room_service().set_ready(room_id, current_user.get_id(), is_ready)
    realtime.notify_room(room.id, realtime.PLAYER_READY, player_id=current_user.get_id(), is_ready=is_ready)
    return _room_response(room)


@rooms.route('/start', methods=['POST'])
@login_required
def start_game():
    data = _payload()
    if not all(isinstance(data.get(k), str) and data.get(k).strip() for k in ('room_id', 'topic', 'game_mode')):
        raise RuleViolation('Missing room_id, topic, or game_mode')
    room = get_room_service().start_game(
        data['room_id'], current_user.get_id(), data['topic'], data['game_mode']
    )
    realtime.notify_room(room.id, realtime.GAME_STARTED)
    return _room_response(room)


@rooms.route('/transfer-host', methods=['POST'])
@login_required
def transfer_host():
    data = _payload()
    room_id = _required_str(data, 'room_id')
    new_host_id = _required_str(data, 'new_host_id')
    room = get_room_service().transfer_host(room_id, current_user.get_id(), new_host_id)
    realtime.notify_room(room.id, realtime.HOST_TRANSFERRED, new_host_id=new_host_id)
    return _room_response(room)


@rooms.route('/emote', methods=['POST'])
@login_required
def send_emote():
    data = _payload()
    room_id = _required_str(data, 'room_id')
    emote = _required_str(data, 'emote')
    room = get_room_service().add_emote(room_id, current_user.get_id(), emote)
    realtime.notify_room(room.id, realtime.EMOTE_SENT, player_id=current_user.get_id(), emote=emote)
    return _room_response(room)


# ---- game actions (also reachable through POST /game-state) ----

def _spin(room_id, data):
    room, reveal = get_room_service().spin(room_id, current_user.get_id())
    realtime.notify_room(room.id, realtime.PLAYER_SPUN, player_id=current_user.get_id())
    return _room_response(room, reveal=reveal)


def _start_voting(room_id, data):
    room = get_room_service().start_voting(room_id, current_user.get_id())
    realtime.notify_room(room.id, realtime.VOTING_STARTED)
    return _room_response(room)


def _vote(room_id, data):
    target_id = _required_str(data, 'target_id')
    room, result = get_room_service().cast_vote(room_id, current_user.get_id(), target_id)
    realtime.notify_room(room.id, realtime.VOTE_CAST, voter_id=current_user.get_id())
    return _room_response(room, result=result.to_dict() if result else None)


def _restart(room_id, data):
    room = get_room_service().restart(room_id, current_user.get_id())
    realtime.notify_room(room.id, realtime.GAME_RESTARTED)
    return _room_response(room)


GAME_ACTIONS = {
    'spin': _spin,
    'start-voting': _start_voting,
    'vote': _vote,
    'restart': _restart,
}


@rooms.route('/spin', methods=['POST'])
@login_required
def spin():
    data = _payload()
    return _spin(_required_str(data, 'room_id'), data)


@rooms.route('/voting/start', methods=['POST'])
@login_required
def start_voting():
    data = _payload()
    return _start_voting(_required_str(data, 'room_id'), data)


@rooms.route('/vote', methods=['POST'])
@login_required
def vote():
    data = _payload()
    return _vote(_required_str(data, 'room_id'), data)


@rooms.route('/restart', methods=['POST'])
@login_required
def restart():
    data = _payload()
    return _restart(_required_str(data, 'room_id'), data)


@rooms.route('/game-state', methods=['GET'])
@login_required
def get_game_state():
    room_id = request.args.get('room_id')
    if not room_id:
        return jsonify({'error': 'Missing room_id'}), 400
    return _room_response(get_room_service().get_room(room_id))


@rooms.route('/game-state', methods=['POST'])
@login_required
def update_game_state():
    data = _payload()
    room_id = _required_str(data, 'room_id')
    action = data.get('action')
    handler = GAME_ACTIONS.get(action)
    if handler is None:
        raise RuleViolation(f"Unknown action; expected one of {', '.join(sorted(GAME_ACTIONS))}")
    return handler(room_id, data)
