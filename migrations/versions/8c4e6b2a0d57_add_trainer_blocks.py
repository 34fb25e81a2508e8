"""add trainer blocks

Revision ID: 8c4e6b2a0d57
Revises: 3f2a9c1d7b10
Create Date: 2025-08-25 21:03:09.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8c4e6b2a0d57'
down_revision = '3f2a9c1d7b10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'trainer_blocks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_minutes', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('note', sa.String(length=160), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('duration_minutes >= 0', name='ck_trainer_blocks_duration_nonneg'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('trainer_blocks', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_trainer_blocks_date'), ['date'], unique=False)


def downgrade():
    with op.batch_alter_table('trainer_blocks', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_trainer_blocks_date'))

    op.drop_table('trainer_blocks')
