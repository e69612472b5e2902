"""Create students, masters and settings tables

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2025-11-24

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1f3c9d2e7b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.String(length=16), nullable=False),
        sa.Column('rfid_code', sa.String(length=64), nullable=False, server_default='N/A'),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('middle_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('suffix', sa.String(length=20), nullable=True),
        sa.Column('year_level', sa.String(length=20), nullable=False),
        sa.Column('school_year', sa.String(length=20), nullable=False),
        sa.Column('program', sa.String(length=20), nullable=False),
        sa.Column('photo', sa.Text(), nullable=True),
        sa.Column('semester', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id')
    )
    op.create_index('ix_students_created_date', 'students', ['created_date'])
    op.create_index('ix_students_program_year_level', 'students', ['program', 'year_level'])

    op.create_table(
        'masters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('register_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('register_message', sa.Text(), nullable=False, server_default=''),
        sa.Column('login_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('login_message', sa.Text(), nullable=False, server_default=''),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    op.drop_table('settings')
    op.drop_table('masters')
    op.drop_index('ix_students_program_year_level', table_name='students')
    op.drop_index('ix_students_created_date', table_name='students')
    op.drop_table('students')
