"""Organizations, users, profile fields and registrations

Revision ID: 202610190900
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '202610190900'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ------------------------------
    # Create organizations table
    # ------------------------------
    op.create_table(
        'adm_organizations',
        sa.Column('org_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('org_uuid', sa.String(36), nullable=False),
        sa.Column('org_shortname', sa.String(10), nullable=False),
        sa.Column('org_longname', sa.String(60), nullable=False),
        sa.Column('org_homepage', sa.String(60), nullable=False, server_default=''),
        sa.Column('org_timestamp_create', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_adm_organizations_org_uuid', 'adm_organizations', ['org_uuid'], unique=True)
    op.create_index('ix_adm_organizations_org_shortname', 'adm_organizations', ['org_shortname'], unique=True)

    # ------------------------------
    # Create users table
    # ------------------------------
    op.create_table(
        'adm_users',
        sa.Column('usr_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('usr_uuid', sa.String(36), nullable=False),
        sa.Column('usr_org_id', sa.Integer(), sa.ForeignKey('adm_organizations.org_id', ondelete='CASCADE'), nullable=False),
        sa.Column('usr_login_name', sa.String(254), nullable=True, unique=True),
        sa.Column('usr_password', sa.String(255), nullable=True),
        sa.Column('usr_valid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('usr_role', sa.String(50), nullable=False, server_default='MEMBER'),
        sa.Column('usr_timestamp_create', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_adm_users_usr_uuid', 'adm_users', ['usr_uuid'], unique=True)
    op.create_index('ix_adm_users_usr_org_id', 'adm_users', ['usr_org_id'])

    # ------------------------------
    # Create profile field tables
    # ------------------------------
    op.create_table(
        'adm_user_fields',
        sa.Column('usf_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('usf_org_id', sa.Integer(), sa.ForeignKey('adm_organizations.org_id', ondelete='CASCADE'), nullable=True),
        sa.Column('usf_name_intern', sa.String(110), nullable=False),
        sa.Column('usf_name', sa.String(100), nullable=False),
        sa.Column('usf_type', sa.String(30), nullable=False, server_default='TEXT'),
        sa.UniqueConstraint('usf_org_id', 'usf_name_intern', name='uq_user_fields_org_name'),
    )
    op.create_index('ix_adm_user_fields_usf_org_id', 'adm_user_fields', ['usf_org_id'])
    op.create_index('ix_adm_user_fields_usf_name_intern', 'adm_user_fields', ['usf_name_intern'])

    op.create_table(
        'adm_user_data',
        sa.Column('usd_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('usd_usr_id', sa.Integer(), sa.ForeignKey('adm_users.usr_id', ondelete='CASCADE'), nullable=False),
        sa.Column('usd_usf_id', sa.Integer(), sa.ForeignKey('adm_user_fields.usf_id', ondelete='CASCADE'), nullable=False),
        sa.Column('usd_value', sa.String(4000), nullable=True),
        sa.UniqueConstraint('usd_usr_id', 'usd_usf_id', name='uq_user_data_usr_usf'),
    )
    op.create_index('ix_adm_user_data_usd_usr_id', 'adm_user_data', ['usd_usr_id'])
    op.create_index('ix_adm_user_data_usd_usf_id', 'adm_user_data', ['usd_usf_id'])

    # ------------------------------
    # Create registrations table
    # ------------------------------
    op.create_table(
        'adm_registrations',
        sa.Column('reg_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reg_org_id', sa.Integer(), sa.ForeignKey('adm_organizations.org_id', ondelete='CASCADE'), nullable=False),
        sa.Column('reg_usr_id', sa.Integer(), sa.ForeignKey('adm_users.usr_id', ondelete='CASCADE'), nullable=False),
        sa.Column('reg_timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('reg_validation_id', sa.String(50), nullable=True),
        sa.UniqueConstraint('reg_org_id', 'reg_usr_id', name='uq_registrations_org_usr'),
    )
    op.create_index('ix_adm_registrations_reg_org_id', 'adm_registrations', ['reg_org_id'])
    op.create_index('ix_adm_registrations_reg_usr_id', 'adm_registrations', ['reg_usr_id'])

    # ------------------------------
    # Create preferences table
    # ------------------------------
    op.create_table(
        'adm_preferences',
        sa.Column('prf_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('prf_org_id', sa.Integer(), sa.ForeignKey('adm_organizations.org_id', ondelete='CASCADE'), nullable=False),
        sa.Column('prf_name', sa.String(50), nullable=False),
        sa.Column('prf_value', sa.String(255), nullable=True),
        sa.UniqueConstraint('prf_org_id', 'prf_name', name='uq_preferences_org_name'),
    )
    op.create_index('ix_adm_preferences_prf_org_id', 'adm_preferences', ['prf_org_id'])


def downgrade() -> None:
    op.drop_table('adm_preferences')
    op.drop_table('adm_registrations')
    op.drop_table('adm_user_data')
    op.drop_table('adm_user_fields')
    op.drop_table('adm_users')
    op.drop_table('adm_organizations')
