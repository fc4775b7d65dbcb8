"""create marketplace tables: users, profiles, jobs, applications, chats

Revision ID: 20261019_0900
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261019_0900'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """
    Create the marketplace schema.

    Features:
    - One application per (talent, job), enforced by a unique constraint
    - Append-only status history ordered by position
    - One chat per application, cascaded with it
    - Optimistic version column on applications
    """
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, comment='talent, company or admin'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'talents',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('experience', sa.Integer(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_talents_user_id', 'talents', ['user_id'], unique=True)

    op.create_table(
        'companies',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_companies_user_id', 'companies', ['user_id'], unique=True)

    op.create_table(
        'jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'company_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'applications_count', sa.Integer(), nullable=False, server_default='0',
            comment='Incremented on apply, decremented on talent withdrawal'
        ),
        *_timestamps(),
    )
    op.create_index('ix_jobs_company_id', 'jobs', ['company_id'])
    op.create_index('ix_jobs_is_active', 'jobs', ['is_active'])

    op.create_table(
        'applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'talent_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('talents.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'job_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'company_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'status', sa.String(length=20), nullable=False, server_default='pending',
            comment='pending, reviewed, interview, hired, rejected, cancelled'
        ),
        sa.Column('applicant_full_name', sa.String(length=255), nullable=False),
        sa.Column('applicant_email', sa.String(length=255), nullable=False),
        sa.Column('applicant_phone', sa.String(length=50), nullable=False),
        sa.Column('experience_years', sa.Integer(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('resume_file_name', sa.String(length=255), nullable=True),
        sa.Column('resume_file_size', sa.Integer(), nullable=True),
        sa.Column('resume_file_type', sa.String(length=100), nullable=True),
        sa.Column('file_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('file_deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('file_deleted_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('interview_scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'version', sa.Integer(), nullable=False, server_default='1',
            comment='Optimistic concurrency token'
        ),
        sa.UniqueConstraint('talent_id', 'job_id', name='uq_applications_talent_job'),
    )
    op.create_index('ix_applications_talent_id', 'applications', ['talent_id'])
    op.create_index('ix_applications_job_id', 'applications', ['job_id'])
    op.create_index('ix_applications_company_id', 'applications', ['company_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_applications_created_at', 'applications', ['created_at'])
    op.create_index('ix_applications_reviewed_at', 'applications', ['reviewed_at'])

    op.create_table(
        'application_status_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'application_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('changed_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('application_id', 'position', name='uq_status_history_position'),
    )
    op.create_index(
        'ix_application_status_history_application_id',
        'application_status_history', ['application_id']
    )

    op.create_table(
        'chats',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'application_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'talent_user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'company_user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('last_message', sa.Text(), nullable=True),
        sa.Column('last_message_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('talent_unread_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('company_unread_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_chats_application_id', 'chats', ['application_id'], unique=True)
    op.create_index('ix_chats_talent_user_id', 'chats', ['talent_user_id'])
    op.create_index('ix_chats_company_user_id', 'chats', ['company_user_id'])

    op.create_table(
        'chat_messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'chat_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('chats.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('sender_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('sender_role', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_chat_messages_chat_id', 'chat_messages', ['chat_id'])


def downgrade() -> None:
    """Drop the marketplace schema in reverse dependency order"""
    op.drop_table('chat_messages')
    op.drop_table('chats')
    op.drop_table('application_status_history')
    op.drop_table('applications')
    op.drop_table('jobs')
    op.drop_table('companies')
    op.drop_table('talents')
    op.drop_table('users')
