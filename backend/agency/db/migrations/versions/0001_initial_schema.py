"""Initial schema: persons, policies, claims, policy_persons, accounts.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'persons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('street', sa.String(length=120), nullable=True),
        sa.Column('house_number', sa.String(length=20), nullable=True),
        sa.Column('postal_code', sa.String(length=10), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_persons'),
    )
    op.create_index('ix_persons_last_name', 'persons', ['last_name'])

    op.create_table(
        'policies',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('person_id', sa.Integer(), nullable=False),
        sa.Column('product_name', sa.String(length=100), nullable=False),
        sa.Column('coverage_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('valid_from', sa.Date(), nullable=False),
        sa.Column('valid_to', sa.Date(), nullable=False),
        sa.CheckConstraint('valid_from <= valid_to', name='ck_policies_validity_interval'),
        sa.ForeignKeyConstraint(['person_id'], ['persons.id'], name='fk_policies_person_id_persons'),
        sa.PrimaryKeyConstraint('id', name='pk_policies'),
    )
    op.create_index('ix_policies_person_id', 'policies', ['person_id'])

    op.create_table(
        'claims',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('policy_id', sa.Integer(), nullable=True),
        sa.Column('person_id', sa.Integer(), nullable=True),
        sa.Column('occurred_on', sa.Date(), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('state', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(
            ['policy_id'], ['policies.id'],
            name='fk_claims_policy_id_policies', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_claims'),
    )
    op.create_index('ix_claims_policy_id', 'claims', ['policy_id'])
    op.create_index('ix_claims_person_id', 'claims', ['person_id'])
    op.create_index('ix_claims_occurred_on', 'claims', ['occurred_on'])

    op.create_table(
        'policy_persons',
        sa.Column('policy_id', sa.Integer(), nullable=False),
        sa.Column('person_id', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(['policy_id'], ['policies.id'], name='fk_policy_persons_policy_id_policies'),
        sa.ForeignKeyConstraint(['person_id'], ['persons.id'], name='fk_policy_persons_person_id_persons'),
        sa.PrimaryKeyConstraint('policy_id', 'person_id', 'role', name='pk_policy_persons'),
    )
    op.create_index('ix_policy_persons_person_id', 'policy_persons', ['person_id'])

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('person_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['person_id'], ['persons.id'],
            name='fk_accounts_person_id_persons', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_accounts'),
    )
    op.create_index('ix_accounts_username', 'accounts', ['username'], unique=True)
    op.create_index('ix_accounts_person_id', 'accounts', ['person_id'])

    op.create_table(
        'account_roles',
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('role_name', sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name='fk_account_roles_account_id_accounts', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('account_id', 'role_name', name='pk_account_roles'),
    )


def downgrade() -> None:
    op.drop_table('account_roles')
    op.drop_index('ix_accounts_person_id', table_name='accounts')
    op.drop_index('ix_accounts_username', table_name='accounts')
    op.drop_table('accounts')
    op.drop_index('ix_policy_persons_person_id', table_name='policy_persons')
    op.drop_table('policy_persons')
    op.drop_index('ix_claims_occurred_on', table_name='claims')
    op.drop_index('ix_claims_person_id', table_name='claims')
    op.drop_index('ix_claims_policy_id', table_name='claims')
    op.drop_table('claims')
    op.drop_index('ix_policies_person_id', table_name='policies')
    op.drop_table('policies')
    op.drop_index('ix_persons_last_name', table_name='persons')
    op.drop_table('persons')
