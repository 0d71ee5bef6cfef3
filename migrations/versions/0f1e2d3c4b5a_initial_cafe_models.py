"""initial cafe models

Revision ID: 0f1e2d3c4b5a
Revises:
Create Date: 2025-11-09 14:10:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0f1e2d3c4b5a'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    conn = op.get_bind()
    insp = sa.inspect(conn)

    if not insp.has_table('roles'):
        op.create_table(
            'roles',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=50), nullable=False, unique=True),
            sa.Column('description', sa.String(length=255), nullable=True),
        )

    if not insp.has_table('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=100), nullable=True),
            sa.Column('email', sa.String(length=120), nullable=True, unique=True),
            sa.Column('password', sa.String(length=255), nullable=True),
            sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        )

    if not insp.has_table('cafe_menu_options'):
        op.create_table(
            'cafe_menu_options',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('menu_date', sa.Date(), nullable=False),
            sa.Column('option_number', sa.Integer(), nullable=False),
            sa.Column('dish_name', sa.String(length=200), nullable=False),
            sa.Column('dish_name_ar', sa.String(length=200), nullable=True),
            sa.Column('description', sa.String(length=500), nullable=True),
            sa.Column('description_ar', sa.String(length=500), nullable=True),
            sa.Column('image_path', sa.String(length=500), nullable=True),
            sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint('menu_date', 'option_number', name='uq_cafe_option_date_number'),
            sqlite_autoincrement=True,
        )
        op.create_index('ix_cafe_menu_options_menu_date', 'cafe_menu_options', ['menu_date'])

    if not insp.has_table('cafe_votes'):
        op.create_table(
            'cafe_votes',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('menu_date', sa.Date(), nullable=False),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('option_id', sa.Integer(), sa.ForeignKey('cafe_menu_options.id', ondelete='CASCADE'), nullable=False),
            sa.Column('voted_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint('menu_date', 'user_id', name='uq_cafe_vote_date_user'),
        )
        op.create_index('ix_cafe_votes_option_id', 'cafe_votes', ['option_id'])

    if not insp.has_table('cafe_menu_results'):
        op.create_table(
            'cafe_menu_results',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('menu_date', sa.Date(), nullable=False, unique=True),
            sa.Column('winning_option_id', sa.Integer(), sa.ForeignKey('cafe_menu_options.id'), nullable=False),
            sa.Column('total_votes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('was_tie', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('decided_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
            sa.Column('finalized_at', sa.DateTime(), nullable=True),
        )

    if not insp.has_table('cafe_decision_log'):
        op.create_table(
            'cafe_decision_log',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('menu_date', sa.Date(), nullable=False),
            sa.Column('winning_option_id', sa.Integer(), nullable=False),
            sa.Column('total_votes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('was_tie', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('decided_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
            sa.Column('source', sa.String(length=20), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )
        op.create_index('ix_cafe_decision_log_menu_date', 'cafe_decision_log', ['menu_date'])

    if not insp.has_table('cafe_suggestions'):
        op.create_table(
            'cafe_suggestions',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('suggestion_text', sa.String(length=200), nullable=False),
            sa.Column('suggested_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not insp.has_table('cafe_suggestion_upvotes'):
        op.create_table(
            'cafe_suggestion_upvotes',
            sa.Column('suggestion_id', sa.Integer(), sa.ForeignKey('cafe_suggestions.id', ondelete='CASCADE'), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), primary_key=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not insp.has_table('cafe_settings'):
        op.create_table(
            'cafe_settings',
            sa.Column('key', sa.String(length=100), primary_key=True),
            sa.Column('value', sa.String(length=255), nullable=False),
            sa.Column('updated_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )
        op.bulk_insert(
            sa.table('cafe_settings', sa.column('key', sa.String), sa.column('value', sa.String)),
            [{'key': 'suggestions_open', 'value': 'false'}],
        )

    if not insp.has_table('notifications'):
        op.create_table(
            'notifications',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('title_ar', sa.String(length=255), nullable=True),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('message_ar', sa.Text(), nullable=True),
            sa.Column('type', sa.String(length=50), nullable=False),
            sa.Column('priority', sa.String(length=20), nullable=False, server_default='medium'),
            sa.Column('action_url', sa.String(length=255), nullable=True),
            sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )
        op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade():
    # Drop in reverse dependency order
    for tbl in (
        'notifications',
        'cafe_settings',
        'cafe_suggestion_upvotes',
        'cafe_suggestions',
        'cafe_decision_log',
        'cafe_menu_results',
        'cafe_votes',
        'cafe_menu_options',
        'users',
        'roles',
    ):
        op.drop_table(tbl)
