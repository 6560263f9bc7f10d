# Models package init
"""
Importing the package registers every table with Base.metadata, which the
relationship() string references, Alembic autogenerate and the test schema
setup all depend on.
"""

from app.models.user import User, friendships
from app.models.post import Post, post_likes
from app.models.comment import Comment

__all__ = ["User", "friendships", "Post", "post_likes", "Comment"]
