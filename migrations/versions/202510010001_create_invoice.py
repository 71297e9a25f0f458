"""Create the invoice table."""

from alembic import op
import sqlalchemy as sa


def _has_table(table_name: str, bind) -> bool:
    inspector = sa.inspect(bind)
    return inspector.has_table(table_name)


# revision identifiers, used by Alembic.
revision = "202510010001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    if not bind:
        return

    table_name = "invoice"
    if _has_table(table_name, bind):
        return

    op.create_table(
        table_name,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=50), nullable=True),
        sa.Column("invoice_date", sa.DateTime(), nullable=True),
        sa.Column("total", sa.Numeric(12, 2), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=True),
    )
    op.create_index("ix_invoice_invoice_date", table_name, ["invoice_date"])
    op.create_index(
        "ix_invoice_active_date", table_name, ["active", "invoice_date"]
    )


def downgrade():
    bind = op.get_bind()
    if not bind:
        return

    table_name = "invoice"
    if not _has_table(table_name, bind):
        return

    op.drop_index("ix_invoice_active_date", table_name=table_name)
    op.drop_index("ix_invoice_invoice_date", table_name=table_name)
    op.drop_table(table_name)
