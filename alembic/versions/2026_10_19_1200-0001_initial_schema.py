"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'students',
        *_base_columns(),
        sa.Column('roll_number', sa.String(length=50), nullable=False),
        sa.Column('dob', sa.String(length=10), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=False),
        sa.Column('batch', sa.String(length=50), nullable=False),
        sa.Column('profile_image', sa.String(length=1000), nullable=False, server_default=''),
        sa.Column('has_logged_in', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_id', 'students', ['id'])
    op.create_index('ix_students_roll_number', 'students', ['roll_number'], unique=True)
    op.create_index('ix_students_name', 'students', ['name'])

    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False, server_default=''),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='student'),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'follows',
        *_base_columns(),
        sa.Column('follower_id', sa.Uuid(), nullable=False),
        sa.Column('followed_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['followed_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('follower_id <> followed_id', name='ck_follows_no_self_follow'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_follows_id', 'follows', ['id'])
    op.create_index('idx_follows_follower_followed', 'follows', ['follower_id', 'followed_id'], unique=True)
    op.create_index('idx_follows_followed', 'follows', ['followed_id'])

    op.create_table(
        'posts',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(length=1000), nullable=False, server_default=''),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_posts_id', 'posts', ['id'])
    op.create_index('ix_posts_user_id', 'posts', ['user_id'])
    # Feed ordering
    op.create_index('idx_posts_created_at', 'posts', [sa.text('created_at DESC')])

    op.create_table(
        'post_comments',
        *_base_columns(),
        sa.Column('post_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_post_comments_id', 'post_comments', ['id'])
    op.create_index('ix_post_comments_user_id', 'post_comments', ['user_id'])
    op.create_index('idx_post_comments_post_position', 'post_comments', ['post_id', 'position'], unique=True)

    op.create_table(
        'post_likes',
        *_base_columns(),
        sa.Column('post_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_post_likes_id', 'post_likes', ['id'])
    op.create_index('ix_post_likes_user_id', 'post_likes', ['user_id'])
    op.create_index('idx_post_likes_post_user', 'post_likes', ['post_id', 'user_id'], unique=True)

    op.create_table(
        'developer_info',
        *_base_columns(),
        sa.Column('developer_name', sa.String(length=255), nullable=False),
        sa.Column('github', sa.String(length=500), nullable=False),
        sa.Column('instagram', sa.String(length=500), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('portfolio', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_developer_info_id', 'developer_info', ['id'])


def downgrade() -> None:
    op.drop_table('developer_info')
    op.drop_table('post_likes')
    op.drop_table('post_comments')
    op.drop_table('posts')
    op.drop_table('follows')
    op.drop_table('users')
    op.drop_table('students')
