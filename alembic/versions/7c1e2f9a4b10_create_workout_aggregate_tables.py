"""create_workout_aggregate_tables

Revision ID: 7c1e2f9a4b10
Revises:
Create Date: 2026-10-19 09:12:41.503117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '7c1e2f9a4b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('USER', 'ADMIN', name='user_role')
workout_status = sa.Enum(
    'PLANNED', 'IN_PROGRESS', 'PAUSED', 'COMPLETED', 'CANCELLED', name='workout_status'
)
exercise_type = sa.Enum('STRENGTH', 'CARDIO', 'FLEXIBILITY', name='exercise_type')
target_muscle_group = sa.Enum(
    'CHEST', 'BACK', 'LEGS', 'ARMS', 'SHOULDERS', 'CORE', 'GLUTES', 'CALVES', 'BICEPS',
    'TRICEPS', 'FOREARMS', 'HAMSTRINGS', 'QUADRICEPS', 'FULL_BODY',
    name='target_muscle_group',
)
difficulty_level = sa.Enum('BEGINNER', 'INTERMEDIATE', 'ADVANCED', name='difficulty_level')


def _soft_delete_columns():
    return [
        sa.Column('deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
    ]


def _create_set_table(name: str, *payload, checks=()):
    op.create_table(
        name,
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'workout_exercise_id',
            sa.Integer(),
            sa.ForeignKey('workout_exercises.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('rest_time_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        *payload,
        *_soft_delete_columns(),
        sa.CheckConstraint(
            'set_number >= 1 AND set_number <= 50', name=f'ck_{name}_set_number_range'
        ),
        *checks,
    )
    op.create_index(f'ix_{name}_workout_exercise_id', name, ['workout_exercise_id'])
    op.create_index(f'ix_{name}_deleted', name, ['deleted'])
    op.create_index(
        f'uq_{name}_active_number',
        name,
        ['workout_exercise_id', 'set_number'],
        unique=True,
        postgresql_where=sa.text('NOT deleted'),
        sqlite_where=sa.text('NOT deleted'),
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('external_id', sa.String(100), nullable=False),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('first_name', sa.String(50), nullable=True),
        sa.Column('last_name', sa.String(50), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_users_external_id', 'users', ['external_id'], unique=True)

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', exercise_type, nullable=False),
        sa.Column('target_muscle_group', target_muscle_group, nullable=False),
        sa.Column('difficulty_level', difficulty_level, nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        *_soft_delete_columns(),
    )
    op.create_index('ix_exercises_name', 'exercises', ['name'])
    op.create_index('ix_exercises_type', 'exercises', ['type'])
    op.create_index('ix_exercises_deleted', 'exercises', ['deleted'])

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', workout_status, nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('actual_duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_soft_delete_columns(),
        sa.CheckConstraint(
            "completed_at IS NULL OR status = 'COMPLETED'",
            name='ck_workout_sessions_completed_at_status',
        ),
        sa.CheckConstraint(
            'actual_duration_minutes IS NULL OR actual_duration_minutes >= 0',
            name='ck_workout_sessions_duration_non_negative',
        ),
    )
    op.create_index('ix_workout_sessions_user_id', 'workout_sessions', ['user_id'])
    op.create_index('ix_workout_sessions_status', 'workout_sessions', ['status'])
    op.create_index('ix_workout_sessions_deleted', 'workout_sessions', ['deleted'])
    op.create_index('ix_workout_sessions_user_created', 'workout_sessions', ['user_id', 'created_at'])

    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'workout_session_id',
            sa.Integer(),
            sa.ForeignKey('workout_sessions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id'), nullable=False),
        sa.Column('order_in_workout', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_soft_delete_columns(),
        sa.CheckConstraint(
            'order_in_workout >= 1 AND order_in_workout <= 100',
            name='ck_workout_exercises_order_range',
        ),
    )
    op.create_index(
        'ix_workout_exercises_workout_session_id', 'workout_exercises', ['workout_session_id']
    )
    op.create_index('ix_workout_exercises_exercise_id', 'workout_exercises', ['exercise_id'])
    op.create_index('ix_workout_exercises_deleted', 'workout_exercises', ['deleted'])
    op.create_index(
        'uq_workout_exercises_active_order',
        'workout_exercises',
        ['workout_session_id', 'order_in_workout'],
        unique=True,
        postgresql_where=sa.text('NOT deleted'),
        sqlite_where=sa.text('NOT deleted'),
    )

    _create_set_table(
        'strength_sets',
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(6, 2), nullable=True),
        checks=[sa.CheckConstraint('reps >= 1', name='ck_strength_sets_reps_positive')],
    )
    _create_set_table(
        'cardio_sets',
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.Column('distance', sa.Numeric(8, 2), nullable=True),
        sa.Column('distance_unit', sa.String(10), nullable=True),
        checks=[
            sa.CheckConstraint('duration_seconds >= 1', name='ck_cardio_sets_duration_positive')
        ],
    )
    _create_set_table(
        'flexibility_sets',
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.Column('stretch_type', sa.String(50), nullable=False),
        sa.Column('intensity', sa.Integer(), nullable=False),
        checks=[
            sa.CheckConstraint(
                'duration_seconds >= 1', name='ck_flexibility_sets_duration_positive'
            ),
            sa.CheckConstraint(
                'intensity >= 1 AND intensity <= 10', name='ck_flexibility_sets_intensity_range'
            ),
        ],
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in ('flexibility_sets', 'cardio_sets', 'strength_sets'):
        op.drop_table(table)
    op.drop_table('workout_exercises')
    op.drop_table('workout_sessions')
    op.drop_table('exercises')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (difficulty_level, target_muscle_group, exercise_type, workout_status, user_role):
        enum.drop(bind, checkfirst=True)
