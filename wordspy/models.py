from wordspy import db
import time


class Room(db.Model):
    __tablename__ = 'rooms'
    id = db.Column(db.String(12), primary_key=True)  # room code, stored upper-case
    host_id = db.Column(db.String(128), nullable=False, index=True)
    game_state = db.Column(db.String(16), nullable=False, default='waiting', index=True)  # waiting, playing, finished
    current_topic = db.Column(db.String(64), nullable=True)
    game_word = db.Column(db.String(128), nullable=True)
    similar_word = db.Column(db.String(128), nullable=True)
    game_mode = db.Column(db.String(32), nullable=True)  # similar-word, impostor, mixed
    current_spin = db.Column(db.Integer, nullable=False, default=0)
    total_spins = db.Column(db.Integer, nullable=False, default=0)
    spin_order = db.Column(db.Text, nullable=True)  # JSON-encoded list of tags
    player_order = db.Column(db.Text, nullable=True)  # JSON-encoded list of user ids
    created_at = db.Column(db.Float, nullable=False, default=time.time)
    updated_at = db.Column(db.Float, nullable=False, default=time.time, onupdate=time.time)
    players = db.relationship(
        'RoomPlayer', back_populates='room', order_by='RoomPlayer.id',
        cascade='all, delete-orphan',
    )
    game_state_row = db.relationship(
        'GameState', back_populates='room', uselist=False,
        cascade='all, delete-orphan',
    )


class RoomPlayer(db.Model):
    __tablename__ = 'room_players'
    __table_args__ = (db.UniqueConstraint('room_id', 'user_id', name='uq_room_players_room_user'),)
    id = db.Column(db.Integer, primary_key=True)  # insertion order doubles as join order
    room_id = db.Column(db.String(12), db.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    player_name = db.Column(db.String(64), nullable=False)
    is_host = db.Column(db.Boolean, nullable=False, default=False)
    is_ready = db.Column(db.Boolean, nullable=False, default=False)
    is_eliminated = db.Column(db.Boolean, nullable=False, default=False)
    player_index = db.Column(db.Integer, nullable=True)  # 1-based position in play order
    created_at = db.Column(db.Float, nullable=False, default=time.time)
    room = db.relationship('Room', back_populates='players')


class GameState(db.Model):
    __tablename__ = 'game_states'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(12), db.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False, unique=True, index=True)
    voting_phase = db.Column(db.Boolean, nullable=False, default=False)
    voting_round = db.Column(db.Integer, nullable=False, default=1)
    is_tie = db.Column(db.Boolean, nullable=False, default=False)
    tied_players = db.Column(db.Text, nullable=True)  # JSON list of user ids
    eliminated_player = db.Column(db.Text, nullable=True)  # JSON {id, name, word_type, votes}
    wrong_elimination = db.Column(db.Boolean, nullable=False, default=False)
    outcome = db.Column(db.String(16), nullable=True)  # players, decoys
    player_words = db.Column(db.Text, nullable=True)  # JSON {user_id: {word, type}}
    votes = db.Column(db.Text, nullable=True)  # JSON {voter_id: target_id}
    emotes = db.Column(db.Text, nullable=True)  # JSON list of {player_id, user_id, emote, timestamp}
    updated_at = db.Column(db.Float, nullable=False, default=time.time, onupdate=time.time)
    room = db.relationship('Room', back_populates='game_state_row')


class UserProfile(db.Model):
    __tablename__ = 'user_profiles'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), unique=True, nullable=False, index=True)
    nickname = db.Column(db.String(64), nullable=True)
    profile_photo_url = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.Float, nullable=False, default=time.time)
    updated_at = db.Column(db.Float, nullable=False, default=time.time, onupdate=time.time)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'nickname': self.nickname,
            'profile_photo_url': self.profile_photo_url,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
