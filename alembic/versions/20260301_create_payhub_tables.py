"""create transactions, webhooks, webhook deliveries and activities tables"""
from alembic import op
import sqlalchemy as sa

revision = "20260301_create_payhub_tables"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "transacoes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("checkout_id", sa.Integer(), nullable=True),
        sa.Column("cliente_nome", sa.String(length=255), nullable=False),
        sa.Column("cliente_email", sa.String(length=255), nullable=False),
        sa.Column("valor", sa.Float(), nullable=False),
        sa.Column("moeda", sa.String(length=3), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("metodo", sa.String(length=100), nullable=False),
        sa.Column("referencia", sa.String(length=100), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("data", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("referencia", name="uq_transacoes_referencia"),
    )
    op.create_index("ix_transacoes_checkout_id", "transacoes", ["checkout_id"])
    op.create_index("ix_transacoes_data", "transacoes", ["data"])
    op.create_index("ix_transacoes_status", "transacoes", ["status"])

    op.create_table(
        "webhooks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("evento", sa.String(length=100), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False),
        sa.Column("ultimo_status", sa.Integer(), nullable=True),
        sa.Column("ultima_execucao", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_webhooks_evento", "webhooks", ["evento"])

    op.create_table(
        "webhook_entregas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("evento", sa.String(length=100), nullable=False),
        sa.Column("recurso_id", sa.String(length=100), nullable=True),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("sucesso", sa.Boolean(), nullable=False),
        sa.Column("ultimo_status", sa.Integer(), nullable=False),
        sa.Column("ultima_execucao", sa.DateTime(timezone=True), nullable=False),
        sa.Column("dados", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_webhook_entregas_ultima_execucao", "webhook_entregas", ["ultima_execucao"])
    op.create_index("ix_webhook_entregas_evento_recurso", "webhook_entregas", ["evento", "recurso_id"])

    op.create_table(
        "atividades",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tipo", sa.String(length=50), nullable=False),
        sa.Column("descricao", sa.String(length=255), nullable=False),
        sa.Column("metadados", sa.JSON(), nullable=True),
        sa.Column("icone", sa.String(length=50), nullable=True),
        sa.Column("cor", sa.String(length=20), nullable=True),
        sa.Column("data", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_atividades_tipo", "atividades", ["tipo"])
    op.create_index("ix_atividades_data", "atividades", ["data"])


def downgrade() -> None:
    op.drop_table("atividades")
    op.drop_table("webhook_entregas")
    op.drop_table("webhooks")
    op.drop_table("transacoes")
