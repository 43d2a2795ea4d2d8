"""Baseline: tenants, portfolios, accounts and import bookkeeping.

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates:
- organizations, clients
- portfolios
- accounts (+ account_contacts, employment_records, account_references)
- import_mappings, import_batches, file_number_sequences
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade() -> None:
    # ==========================================================================
    # organizations / clients
    # ==========================================================================
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'clients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_clients_org', 'clients', ['organization_id'])

    # ==========================================================================
    # portfolios
    # ==========================================================================
    op.create_table(
        'portfolios',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('creditor_name', sa.String(255), nullable=True),
        sa.Column('debt_type', sa.String(50), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('purchase_price', sa.Integer(), server_default='0', nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        sa.Column('total_accounts', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_face_value', sa.Integer(), server_default='0', nullable=False),
        sa.Column('custom_field_labels', JSON, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_portfolios_org', 'portfolios', ['organization_id'])

    # ==========================================================================
    # accounts
    # ==========================================================================
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('portfolio_id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('assigned_collector_id', sa.Uuid(), nullable=True),
        sa.Column('linked_account_id', sa.Uuid(), nullable=True),
        sa.Column('file_number', sa.String(40), nullable=True),
        sa.Column('account_number', sa.String(100), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('date_of_birth', sa.Text(), nullable=True),  # encrypted
        sa.Column('ssn', sa.Text(), nullable=True),  # encrypted
        sa.Column('ssn_last4', sa.String(4), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('original_creditor', sa.String(255), nullable=True),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('original_balance', sa.Integer(), server_default='0', nullable=False),
        sa.Column('current_balance', sa.Integer(), server_default='0', nullable=False),
        sa.Column('status', sa.String(30), server_default='open', nullable=False),
        sa.Column('last_contact_date', sa.String(30), nullable=True),
        sa.Column('next_follow_up_date', sa.String(30), nullable=True),
        sa.Column('custom_fields', JSON, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['portfolio_id'], ['portfolios.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['linked_account_id'], ['accounts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_accounts_org', 'accounts', ['organization_id'])
    op.create_index('idx_accounts_portfolio', 'accounts', ['portfolio_id', 'created_at'])
    op.create_index('idx_accounts_portfolio_number', 'accounts', ['portfolio_id', 'account_number'])

    op.create_table(
        'account_contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('value', sa.String(255), nullable=False),
        sa.Column('label', sa.String(50), nullable=True),
        sa.Column('is_primary', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_valid', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('last_verified', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_account_contacts_account', 'account_contacts', ['account_id', 'type'])

    op.create_table(
        'employment_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('employer_name', sa.String(255), nullable=False),
        sa.Column('employer_phone', sa.String(50), nullable=True),
        sa.Column('employer_address', sa.String(255), nullable=True),
        sa.Column('position', sa.String(100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('salary', sa.Integer(), nullable=True),
        sa.Column('is_current', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('verified_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_employment_records_account', 'employment_records', ['account_id'])

    op.create_table(
        'account_references',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('relationship', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('added_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_account_references_account', 'account_references', ['account_id'])

    # ==========================================================================
    # import bookkeeping
    # ==========================================================================
    op.create_table(
        'import_mappings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('import_type', sa.String(20), nullable=False),
        sa.Column('field_mappings', JSON, nullable=False),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('usage_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_import_mappings_org', 'import_mappings', ['organization_id', 'import_type'])
    op.create_index(
        'uq_import_mapping_default',
        'import_mappings',
        ['organization_id', 'import_type'],
        unique=True,
        postgresql_where=sa.text('is_default = TRUE'),
        sqlite_where=sa.text('is_default = 1'),
    )

    op.create_table(
        'import_batches',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('portfolio_id', sa.Uuid(), nullable=False),
        sa.Column('mapping_id', sa.Uuid(), nullable=True),
        sa.Column('import_type', sa.String(20), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), server_default='processing', nullable=False),
        sa.Column('column_mapping_snapshot', JSON, nullable=True),
        sa.Column('file_number_start', sa.Integer(), nullable=True),
        sa.Column('total_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('updated_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('linked_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('matched_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('added_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('error_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('errors', JSON, nullable=True),
        sa.Column('warnings', JSON, nullable=True),
        sa.Column('fanout_failures', JSON, nullable=True),
        sa.Column('failure_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['portfolio_id'], ['portfolios.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['mapping_id'], ['import_mappings.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_import_batches_org_created', 'import_batches', ['organization_id', 'created_at'])

    op.create_table(
        'file_number_sequences',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('last_value', sa.Integer(), server_default='0', nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'year', name='uq_file_number_sequence_org_year'),
    )


def downgrade() -> None:
    op.drop_table('file_number_sequences')
    op.drop_index('idx_import_batches_org_created', table_name='import_batches')
    op.drop_table('import_batches')
    op.drop_index('uq_import_mapping_default', table_name='import_mappings')
    op.drop_index('idx_import_mappings_org', table_name='import_mappings')
    op.drop_table('import_mappings')
    op.drop_index('idx_account_references_account', table_name='account_references')
    op.drop_table('account_references')
    op.drop_index('idx_employment_records_account', table_name='employment_records')
    op.drop_table('employment_records')
    op.drop_index('idx_account_contacts_account', table_name='account_contacts')
    op.drop_table('account_contacts')
    op.drop_index('idx_accounts_portfolio_number', table_name='accounts')
    op.drop_index('idx_accounts_portfolio', table_name='accounts')
    op.drop_index('idx_accounts_org', table_name='accounts')
    op.drop_table('accounts')
    op.drop_index('idx_portfolios_org', table_name='portfolios')
    op.drop_table('portfolios')
    op.drop_index('idx_clients_org', table_name='clients')
    op.drop_table('clients')
    op.drop_table('organizations')
