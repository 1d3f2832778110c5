"""initial_schema

Revision ID: 3f1d2c9a7b10
Revises:
Create Date: 2025-09-02 10:14:22.418503

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1d2c9a7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('user_type', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('children', sa.JSON(), nullable=True),
        sa.Column('daycare_id', sa.String(length=64), nullable=True),
        sa.Column('role', sa.String(length=64), nullable=True),
        sa.Column('profile_complete', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('email_consent', sa.Boolean(), nullable=False),
        sa.Column('sms_consent', sa.Boolean(), nullable=False),
        sa.Column('promotional_consent', sa.Boolean(), nullable=False),
        sa.Column('acknowledgement', sa.Boolean(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('email_verification_token', sa.String(length=64), nullable=True),
        sa.Column('email_verification_expires', sa.DateTime(), nullable=True),
        sa.Column('reset_password_token', sa.String(length=64), nullable=True),
        sa.Column('reset_password_expires', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_user_type'), ['user_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_is_active'), ['is_active'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_email_verification_token'), ['email_verification_token'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_reset_password_token'), ['reset_password_token'], unique=False)

    op.create_table('daycares',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=False),
        sa.Column('region', sa.String(length=120), nullable=True),
        sa.Column('ward', sa.String(length=120), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('contact_us_page', sa.String(length=255), nullable=True),
        sa.Column('forms_link', sa.String(length=255), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('price_string', sa.String(length=50), nullable=True),
        sa.Column('registration_fee', sa.Float(), nullable=True),
        sa.Column('daycare_type', sa.String(length=120), nullable=True),
        sa.Column('program_age', sa.String(length=120), nullable=True),
        sa.Column('cwelcc', sa.Boolean(), nullable=False),
        sa.Column('subsidy_available', sa.Boolean(), nullable=False),
        sa.Column('hours', sa.String(length=120), nullable=True),
        sa.Column('registration_info', sa.Text(), nullable=True),
        sa.Column('languages', sa.JSON(), nullable=True),
        sa.Column('special_needs', sa.Boolean(), nullable=True),
        sa.Column('transportation', sa.Boolean(), nullable=True),
        sa.Column('meals', sa.Boolean(), nullable=True),
        sa.Column('nap_time', sa.Boolean(), nullable=True),
        sa.Column('outdoor_space', sa.Boolean(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('review_count', sa.Integer(), nullable=True),
        sa.Column('google_review_summary', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('daycares', schema=None) as batch_op:
        for column in ('name', 'city', 'region', 'ward', 'price', 'daycare_type',
                       'program_age', 'cwelcc', 'subsidy_available', 'rating'):
            batch_op.create_index(batch_op.f(f'ix_daycares_{column}'), [column], unique=False)

    # vacancy and quality_rating were part of the first age-group layout
    op.create_table('daycare_age_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('daycare_id', sa.Integer(), nullable=False),
        sa.Column('group', sa.String(length=20), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('vacancy', sa.Integer(), nullable=True),
        sa.Column('quality_rating', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['daycare_id'], ['daycares.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('daycare_id', 'group', name='uq_daycare_age_group')
    )
    with op.batch_alter_table('daycare_age_groups', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_daycare_age_groups_daycare_id'), ['daycare_id'], unique=False)

    op.create_table('daycare_features',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('daycare_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.ForeignKeyConstraint(['daycare_id'], ['daycares.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('daycare_features', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_daycare_features_daycare_id'), ['daycare_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_daycare_features_name'), ['name'], unique=False)


def downgrade():
    op.drop_table('daycare_features')
    op.drop_table('daycare_age_groups')
    op.drop_table('daycares')
    op.drop_table('users')
