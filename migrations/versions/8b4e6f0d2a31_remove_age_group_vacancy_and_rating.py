"""remove_age_group_vacancy_and_rating

Revision ID: 8b4e6f0d2a31
Revises: 3f1d2c9a7b10
Create Date: 2025-10-14 18:02:51.730264

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8b4e6f0d2a31'
down_revision = '3f1d2c9a7b10'
branch_labels = None
depends_on = None


def upgrade():
    # Age groups now carry capacity only; drop the columns if they exist
    from sqlalchemy import inspect
    from alembic import context

    conn = context.get_bind()
    inspector = inspect(conn)
    columns = {column['name'] for column in inspector.get_columns('daycare_age_groups')}

    with op.batch_alter_table('daycare_age_groups', schema=None) as batch_op:
        if 'vacancy' in columns:
            batch_op.drop_column('vacancy')
        if 'quality_rating' in columns:
            batch_op.drop_column('quality_rating')


def downgrade():
    with op.batch_alter_table('daycare_age_groups', schema=None) as batch_op:
        batch_op.add_column(sa.Column('vacancy', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('quality_rating', sa.Float(), nullable=True))
