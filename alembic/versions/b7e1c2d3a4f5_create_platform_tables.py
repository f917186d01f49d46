"""create_platform_tables

Revision ID: b7e1c2d3a4f5
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7e1c2d3a4f5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role_enum = sa.Enum('ADMIN', 'INSTRUCTOR', 'LEARNER', name='user_role_enum')


def upgrade() -> None:
    """Create users, lessons and progress tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', user_role_enum, nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('instructor_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['instructor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lessons_instructor_id', 'lessons', ['instructor_id'])

    op.create_table(
        'progress',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('learner_id', sa.Integer(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('completion_percent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['learner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('learner_id', 'lesson_id', name='uq_learner_lesson'),
        sa.CheckConstraint(
            'completion_percent >= 0 AND completion_percent <= 100',
            name='ck_completion_percent_range',
        ),
    )
    op.create_index('ix_progress_id', 'progress', ['id'])
    op.create_index('ix_progress_learner_id', 'progress', ['learner_id'])
    op.create_index('ix_progress_lesson_id', 'progress', ['lesson_id'])


def downgrade() -> None:
    """Drop progress, lessons and users tables."""
    op.drop_index('ix_progress_lesson_id', table_name='progress')
    op.drop_index('ix_progress_learner_id', table_name='progress')
    op.drop_index('ix_progress_id', table_name='progress')
    op.drop_table('progress')
    op.drop_index('ix_lessons_instructor_id', table_name='lessons')
    op.drop_table('lessons')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    user_role_enum.drop(op.get_bind(), checkfirst=True)
