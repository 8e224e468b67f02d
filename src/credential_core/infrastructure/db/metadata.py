"""SQLAlchemy metadata for a default credential-bearing users table."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("username", sa.Text(), nullable=False),
    sa.Column("email", sa.Text(), nullable=True),
    sa.Column("crypted_password", sa.Text(), nullable=True),
    sa.Column("salt", sa.Text(), nullable=True),
    sa.Column("activation_state", sa.Text(), nullable=True),
    sa.Column("activation_token", sa.Text(), nullable=True),
    sa.Column("remember_me_token", sa.Text(), nullable=True),
    sa.Column("remember_me_token_expires_at", sa.DateTime(timezone=True), nullable=True),
    sa.UniqueConstraint("username", name="uq_users_username"),
)

sa.Index("ix_users_activation_token", users.c.activation_token)
sa.Index("ix_users_remember_me_token", users.c.remember_me_token)
