from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the wordspy game server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'room_store': current_app.config.get('ROOM_STORE', 'sql')})
