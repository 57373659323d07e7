"""create play_session and score tables

Revision ID: 5c2a9e7d1f40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d1f40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'play_session' not in existing_tables:
        op.create_table(
            'play_session',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('location_id', sa.String(length=64), nullable=False),
            sa.Column('token', sa.String(length=64), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('used_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('token'),
        )
        op.create_index('ix_play_session_location_token', 'play_session', ['location_id', 'token'])

    if 'score' not in existing_tables:
        op.create_table(
            'score',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('location_id', sa.String(length=64), nullable=False),
            sa.Column('value', sa.Integer(), nullable=False),
            sa.Column('nickname', sa.String(length=24), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_score_location_created', 'score', ['location_id', 'created_at'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'score' in existing_tables:
        op.drop_index('ix_score_location_created', table_name='score')
        op.drop_table('score')
    if 'play_session' in existing_tables:
        op.drop_index('ix_play_session_location_token', table_name='play_session')
        op.drop_table('play_session')
