"""create college cms schema

Revision ID: 5c1e0a7d2b41
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e0a7d2b41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_TYPES = ('ADMIN', 'SUPERADMIN', 'GUEST')
SECTION_TYPES = ('HERO', 'ABOUT', 'STUDENT_ACTIVITIES', 'WHY_US', 'CUSTOM')
FIELD_TYPES = ('TEXT', 'TEXTAREA', 'EMAIL', 'NUMBER', 'SELECT', 'CHECKBOX', 'RADIO', 'DATE', 'FILE')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create universities, colleges, users, sections, programs, forms and audit logs."""
    op.create_table(
        'universities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('logo_url', sa.String(length=1000), nullable=True),
        sa.Column('social_media', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('news_items', sa.JSON(), nullable=True),
        sa.Column('content', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_universities_slug', 'universities', ['slug'], unique=True)

    op.create_table(
        'colleges',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('theme', sa.JSON(), nullable=True),
        sa.Column('gallery_images', sa.JSON(), nullable=True),
        sa.Column('projects', sa.JSON(), nullable=True),
        sa.Column('social_media', sa.JSON(), nullable=True),
        sa.Column('leaders', sa.JSON(), nullable=True),
        sa.Column('faq', sa.JSON(), nullable=True),
        sa.Column('faq_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('university_id', sa.Uuid(), nullable=True),
        sa.Column('created_by_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['university_id'], ['universities.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_colleges_slug', 'colleges', ['slug'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('clerk_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('image', sa.String(length=1000), nullable=True),
        sa.Column('onboarded', sa.Boolean(), nullable=True),
        sa.Column('user_type', sa.Enum(*USER_TYPES, name='user_type'), nullable=True),
        sa.Column('college_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_clerk_id', 'users', ['clerk_id'], unique=True)

    # colleges and users reference each other
    op.create_foreign_key(
        'fk_colleges_created_by_id', 'colleges', 'users',
        ['created_by_id'], ['id'], ondelete='SET NULL',
    )

    op.create_table(
        'sections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('college_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.Column('section_type', sa.Enum(*SECTION_TYPES, name='section_type'), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sections_college_id', 'sections', ['college_id'])

    op.create_table(
        'programs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('college_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'form_sections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('college_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_sections_college_id', 'form_sections', ['college_id'])

    op.create_table(
        'form_fields',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('form_section_id', sa.Uuid(), nullable=False),
        sa.Column('label', sa.String(length=500), nullable=False),
        sa.Column('type', sa.Enum(*FIELD_TYPES, name='form_field_type'), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=True),
        sa.Column('options', sa.JSON(), nullable=True),
        sa.Column('validation', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['form_section_id'], ['form_sections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_fields_form_section_id', 'form_fields', ['form_section_id'])

    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('form_section_id', sa.Uuid(), nullable=False),
        sa.Column('college_id', sa.Uuid(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['form_section_id'], ['form_sections.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_submissions_form_section_id', 'form_submissions', ['form_section_id'])
    op.create_index('ix_form_submissions_college_id', 'form_submissions', ['college_id'])
    op.create_index('ix_form_submissions_submitted_at', 'form_submissions', ['submitted_at'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entity', sa.String(length=100), nullable=False),
        sa.Column('entity_id', sa.String(length=255), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    """Drop every table and enum type created by upgrade."""
    op.drop_table('audit_logs')
    op.drop_table('form_submissions')
    op.drop_table('form_fields')
    op.drop_table('form_sections')
    op.drop_table('programs')
    op.drop_table('sections')
    op.drop_constraint('fk_colleges_created_by_id', 'colleges', type_='foreignkey')
    op.drop_table('users')
    op.drop_table('colleges')
    op.drop_table('universities')
    for enum_name in ('form_field_type', 'section_type', 'user_type'):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
