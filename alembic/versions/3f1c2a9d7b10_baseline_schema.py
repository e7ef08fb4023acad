"""baseline_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op

from libs.db.base import Base
from libs.db.bootstrap import load_models


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Databases created by the startup bootstrap already hold these tables
    load_models()
    Base.metadata.create_all(bind=op.get_bind(), checkfirst=True)


def downgrade() -> None:
    load_models()
    Base.metadata.drop_all(bind=op.get_bind(), checkfirst=True)
