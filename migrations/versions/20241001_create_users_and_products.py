"""create users and products tables"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "users_products_20241001"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = ("entrepreneur", "delivery")
PRODUCT_STATUSES = ("Pending", "Accepted", "In Transit", "Delivered", "Cancelled")


def upgrade():
    user_role_enum = sa.Enum(*USER_ROLES, name="user_role_enum")
    product_status_enum = sa.Enum(*PRODUCT_STATUSES, name="product_status_enum")
    user_role_enum.create(op.get_bind(), checkfirst=True)
    product_status_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_token", sa.String(length=128), nullable=True),
        sa.Column("email_verification_expires", sa.DateTime(), nullable=True),
        sa.Column("password_reset_token", sa.String(length=128), nullable=True),
        sa.Column("password_reset_expires", sa.DateTime(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lock_until", sa.DateTime(), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", "role", name="uq_users_email_role"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("entrepreneur_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("entrepreneur_name", sa.String(length=120), nullable=False),
        sa.Column("product_name", sa.String(length=200), nullable=False),
        sa.Column("quantity", sa.String(length=64), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("from_location", sa.String(length=255), nullable=False),
        sa.Column("to_location", sa.String(length=255), nullable=False),
        sa.Column("status", product_status_enum, nullable=False, server_default="Pending"),
        sa.Column("current_location", sa.String(length=255), nullable=True),
        sa.Column("delivery_partner_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("delivery_partner_name", sa.String(length=120), nullable=True),
        sa.Column("delivery_partner_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_products_entrepreneur_id", "products", ["entrepreneur_id"])
    op.create_index("ix_products_delivery_partner_id", "products", ["delivery_partner_id"])
    op.create_index("ix_products_status", "products", ["status"])


def downgrade():
    op.drop_index("ix_products_status", table_name="products")
    op.drop_index("ix_products_delivery_partner_id", table_name="products")
    op.drop_index("ix_products_entrepreneur_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_users_password_reset_token", table_name="users")
    op.drop_index("ix_users_email_verification_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    sa.Enum(*PRODUCT_STATUSES, name="product_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(*USER_ROLES, name="user_role_enum").drop(op.get_bind(), checkfirst=True)
