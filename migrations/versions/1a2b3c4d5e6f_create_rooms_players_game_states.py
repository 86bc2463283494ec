"""create rooms, room_players, game_states

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa.inspect(bind).get_table_names())

    if 'rooms' not in existing_tables:
        op.create_table(
            'rooms',
            sa.Column('id', sa.String(length=12), primary_key=True),
            sa.Column('host_id', sa.String(length=128), nullable=False),
            sa.Column('game_state', sa.String(length=16), nullable=False, server_default='waiting'),
            sa.Column('current_topic', sa.String(length=64), nullable=True),
            sa.Column('game_word', sa.String(length=128), nullable=True),
            sa.Column('similar_word', sa.String(length=128), nullable=True),
            sa.Column('game_mode', sa.String(length=32), nullable=True),
            sa.Column('current_spin', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('total_spins', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('spin_order', sa.Text(), nullable=True),
            sa.Column('player_order', sa.Text(), nullable=True),
            sa.Column('created_at', sa.Float(), nullable=False),
            sa.Column('updated_at', sa.Float(), nullable=False),
        )
        op.create_index('ix_rooms_host_id', 'rooms', ['host_id'])
        op.create_index('ix_rooms_game_state', 'rooms', ['game_state'])

    if 'room_players' not in existing_tables:
        op.create_table(
            'room_players',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.String(length=12), sa.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False),
            sa.Column('user_id', sa.String(length=128), nullable=False),
            sa.Column('player_name', sa.String(length=64), nullable=False),
            sa.Column('is_host', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_ready', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_eliminated', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('player_index', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.Float(), nullable=False),
            sa.UniqueConstraint('room_id', 'user_id', name='uq_room_players_room_user'),
        )
        op.create_index('ix_room_players_room_id', 'room_players', ['room_id'])
        op.create_index('ix_room_players_user_id', 'room_players', ['user_id'])

    if 'game_states' not in existing_tables:
        op.create_table(
            'game_states',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.String(length=12), sa.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False),
            sa.Column('voting_phase', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('voting_round', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('is_tie', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('tied_players', sa.Text(), nullable=True),
            sa.Column('eliminated_player', sa.Text(), nullable=True),
            sa.Column('wrong_elimination', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('outcome', sa.String(length=16), nullable=True),
            sa.Column('player_words', sa.Text(), nullable=True),
            sa.Column('votes', sa.Text(), nullable=True),
            sa.Column('emotes', sa.Text(), nullable=True),
            sa.Column('updated_at', sa.Float(), nullable=False),
        )
        op.create_index('ix_game_states_room_id', 'game_states', ['room_id'], unique=True)


def downgrade():
    op.drop_index('ix_game_states_room_id', table_name='game_states')
    op.drop_table('game_states')
    op.drop_index('ix_room_players_user_id', table_name='room_players')
    op.drop_index('ix_room_players_room_id', table_name='room_players')
    op.drop_table('room_players')
    op.drop_index('ix_rooms_game_state', table_name='rooms')
    op.drop_index('ix_rooms_host_id', table_name='rooms')
    op.drop_table('rooms')
