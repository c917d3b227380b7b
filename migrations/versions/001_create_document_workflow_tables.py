"""Create users, documents, permission_requests and audit_log tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


USER_ROLE = postgresql.ENUM('USER', 'ADMIN', name='userrole', create_type=False)
DOCUMENT_STATUS = postgresql.ENUM(
    'uploaded',
    'pending_replace',
    'pending_remove',
    'approved_replace',
    'approved_remove',
    'rejected_replace',
    'rejected_remove',
    name='documentstatus',
    create_type=False,
)
REQUEST_TYPE = postgresql.ENUM('REPLACE', 'REMOVE', name='requesttype', create_type=False)
PERMISSION_STATUS = postgresql.ENUM(
    'ONREVIEW', 'APPROVED', 'REJECTED', name='permissionstatus', create_type=False
)


def upgrade():
    bind = op.get_bind()
    for enum_type in (USER_ROLE, DOCUMENT_STATUS, REQUEST_TYPE, PERMISSION_STATUS):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name_doc', sa.Text(), nullable=False),
        sa.Column('url_doc', sa.Text(), nullable=False),
        sa.Column('status', DOCUMENT_STATUS, server_default='uploaded', nullable=False),
        sa.Column('is_replace_permission', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_remove_permission', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Text(), nullable=False),
        sa.Column('updated_by', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
    )
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_created_at', 'documents', ['created_at'])

    op.create_table(
        'permission_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('admin_id', sa.Integer(), nullable=False),
        sa.Column('request_type', REQUEST_TYPE, nullable=False),
        sa.Column('status_permission', PERMISSION_STATUS, server_default='ONREVIEW', nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('admin_note', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['admin_id'], ['users.id'], ondelete='RESTRICT'),
    )
    op.create_index('ix_permission_requests_admin_id', 'permission_requests', ['admin_id'])
    op.create_index('ix_permission_requests_user_id', 'permission_requests', ['user_id'])

    # At most one request under review per document
    op.create_index(
        'uq_permission_requests_document_onreview',
        'permission_requests',
        ['document_id'],
        unique=True,
        postgresql_where=sa.text("status_permission = 'ONREVIEW'"),
    )

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=True),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_audit_log_entity', 'audit_log', ['entity_type', 'entity_id'])
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])


def downgrade():
    op.drop_index('ix_audit_log_created_at', table_name='audit_log')
    op.drop_index('ix_audit_log_entity', table_name='audit_log')
    op.drop_table('audit_log')

    op.drop_index('uq_permission_requests_document_onreview', table_name='permission_requests')
    op.drop_index('ix_permission_requests_user_id', table_name='permission_requests')
    op.drop_index('ix_permission_requests_admin_id', table_name='permission_requests')
    op.drop_table('permission_requests')

    op.drop_index('ix_documents_created_at', table_name='documents')
    op.drop_index('ix_documents_user_id', table_name='documents')
    op.drop_table('documents')

    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (PERMISSION_STATUS, REQUEST_TYPE, DOCUMENT_STATUS, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
