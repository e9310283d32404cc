"""initial_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-01-05 09:00:00.000000+00:00

Tables : counters, users, user_refresh_tokens, patients, care_episodes,
appointments, charges.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLES = ('admin', 'medecin', 'assistant')
APPOINTMENT_STATUSES = ('scheduled', 'confirmed', 'completed', 'cancelled')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # === SEQUENCES ===
    op.create_table(
        'counters',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('name', name=op.f('pk_counters')),
        comment='Séquences nommées (numérotation des patients)',
    )

    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column(
            'role',
            sa.Enum(*USER_ROLES, name='user_role_enum', create_constraint=True),
            nullable=False,
        ),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        comment='Table des utilisateurs du cabinet',
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'user_refresh_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_user_refresh_tokens_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_user_refresh_tokens')),
        sa.UniqueConstraint('user_id', 'token_hash', name='uq_user_refresh_token'),
        comment='Refresh tokens révocables (empreintes SHA-256)',
    )
    op.create_index(op.f('ix_user_refresh_tokens_user_id'), 'user_refresh_tokens', ['user_id'])
    op.create_index(op.f('ix_user_refresh_tokens_token_hash'), 'user_refresh_tokens', ['token_hash'])

    # === PATIENTS ===
    op.create_table(
        'patients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sequence_id', sa.Integer(), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('insurer', sa.String(length=100), nullable=True),
        sa.Column('insurer_number', sa.String(length=50), nullable=True),
        sa.Column('medical_history', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_patients')),
        comment='Table des patients du cabinet',
    )
    op.create_index(op.f('ix_patients_sequence_id'), 'patients', ['sequence_id'], unique=True)
    op.create_index(op.f('ix_patients_last_name'), 'patients', ['last_name'])
    op.create_index(op.f('ix_patients_first_name'), 'patients', ['first_name'])
    op.create_index(op.f('ix_patients_phone'), 'patients', ['phone'])

    op.create_table(
        'care_episodes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('tooth', sa.String(length=20), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('billed_amount', sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column('received_amount', sa.Numeric(precision=12, scale=3), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('billed_amount >= 0', name=op.f('ck_care_episodes_billed_positive')),
        sa.CheckConstraint('received_amount >= 0', name=op.f('ck_care_episodes_received_positive')),
        sa.ForeignKeyConstraint(
            ['patient_id'], ['patients.id'],
            name=op.f('fk_care_episodes_patient_id_patients'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_care_episodes')),
        comment='Consultations (soins) rattachées aux patients',
    )
    op.create_index(op.f('ix_care_episodes_patient_id'), 'care_episodes', ['patient_id'])
    op.create_index(op.f('ix_care_episodes_date'), 'care_episodes', ['date'])

    # === APPOINTMENTS ===
    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('patient_display_name', sa.String(length=201), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*APPOINTMENT_STATUSES, name='appointment_status_enum', create_constraint=True),
            nullable=False,
        ),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['patient_id'], ['patients.id'],
            name=op.f('fk_appointments_patient_id_patients'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['created_by'], ['users.id'],
            name=op.f('fk_appointments_created_by_users'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_appointments')),
        comment='Rendez-vous des patients',
    )
    op.create_index('ix_appointments_patient_date', 'appointments', ['patient_id', 'date'])
    op.create_index('ix_appointments_date_start', 'appointments', ['date', 'start_time'])
    op.create_index(op.f('ix_appointments_status'), 'appointments', ['status'])

    # === CHARGES ===
    op.create_table(
        'charges',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=3), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name=op.f('ck_charges_amount_positive')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_charges')),
        comment='Dépenses du cabinet',
    )
    op.create_index(op.f('ix_charges_date'), 'charges', ['date'])


def downgrade() -> None:
    op.drop_index(op.f('ix_charges_date'), table_name='charges')
    op.drop_table('charges')

    op.drop_index(op.f('ix_appointments_status'), table_name='appointments')
    op.drop_index('ix_appointments_date_start', table_name='appointments')
    op.drop_index('ix_appointments_patient_date', table_name='appointments')
    op.drop_table('appointments')

    op.drop_index(op.f('ix_care_episodes_date'), table_name='care_episodes')
    op.drop_index(op.f('ix_care_episodes_patient_id'), table_name='care_episodes')
    op.drop_table('care_episodes')

    op.drop_index(op.f('ix_patients_phone'), table_name='patients')
    op.drop_index(op.f('ix_patients_first_name'), table_name='patients')
    op.drop_index(op.f('ix_patients_last_name'), table_name='patients')
    op.drop_index(op.f('ix_patients_sequence_id'), table_name='patients')
    op.drop_table('patients')

    op.drop_index(op.f('ix_user_refresh_tokens_token_hash'), table_name='user_refresh_tokens')
    op.drop_index(op.f('ix_user_refresh_tokens_user_id'), table_name='user_refresh_tokens')
    op.drop_table('user_refresh_tokens')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    op.drop_table('counters')

    sa.Enum(name='appointment_status_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='user_role_enum').drop(op.get_bind(), checkfirst=True)
