import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    logging.getLogger('wordspy').setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Identity comes from the upstream provider (see wordspy.auth)
    from wordspy import auth  # noqa: F401

    # Room registry backend (memory or sql), chosen by ROOM_STORE
    from wordspy.store import init_room_store
    init_room_store(flask_app)

    # Import and register blueprints here
    from wordspy.main import main
    flask_app.register_blueprint(main)

    from wordspy.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from wordspy.api.profiles import profiles
    flask_app.register_blueprint(profiles, url_prefix='/api')

    from wordspy.errors import RoomError

    @flask_app.errorhandler(RoomError)
    def handle_room_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({'error': 'Not found'}), 404

    @flask_app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return jsonify({'error': 'Method not allowed'}), 405

    @flask_app.errorhandler(500)
    def handle_internal_error(exc):
        # Flask has already logged the original exception
        return jsonify({'error': 'Internal server error'}), 500

    # Register Socket.IO event handlers
    from wordspy.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Ensure models are registered on the metadata for create_all / migrations
    from wordspy import models  # noqa: F401

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates all tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('rooms-prune')
    def rooms_prune_command():
        """Deletes orphaned and stale rooms."""
        from wordspy.store import get_room_service
        with flask_app.app_context():
            removed = get_room_service().prune_rooms()
            print(f'Pruned {len(removed)} room(s)')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(rooms_prune_command)

    return flask_app
