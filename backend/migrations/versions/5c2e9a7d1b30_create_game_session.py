"""create game_session table

Revision ID: 5c2e9a7d1b30
Revises:
Create Date: 2026-10-16 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7d1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game_session' in set(insp.get_table_names()):
        return

    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_updated', sa.String(length=40), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.create_index('ix_game_session_code', ['code'], unique=True)


def downgrade():
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.drop_index('ix_game_session_code')
    op.drop_table('game_session')
