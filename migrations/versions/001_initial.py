"""Initial migration - users and print_jobs

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    
    # Create print_jobs table
    op.create_table('print_jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('file_path', sa.String(length=255), nullable=False),
        sa.Column('original_filename', sa.String(length=255), nullable=False),
        sa.Column('file_type', sa.String(length=255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('is_color', sa.Boolean(), nullable=False),
        sa.Column('copies', sa.Integer(), nullable=False),
        sa.Column('page_range', sa.String(length=100), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'PRINTING', 'COMPLETED', 'EXPIRED', name='jobstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('file_deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_path')
    )
    op.create_index(op.f('ix_print_jobs_created_at'), 'print_jobs', ['created_at'], unique=False)
    op.create_index(op.f('ix_print_jobs_file_deleted_at'), 'print_jobs', ['file_deleted_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_print_jobs_file_deleted_at'), table_name='print_jobs')
    op.drop_index(op.f('ix_print_jobs_created_at'), table_name='print_jobs')
    op.drop_table('print_jobs')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
