"""
Snapgram Backend — Post, Comment & Feed Schemas
=================================================

What:  Response shapes for posts, comments and the feed, plus the comment
       request body. Upload input is multipart form data and is declared on
       the route itself.

Shapes:
    PostResponse     → upload, like/unlike, profile post list
                       (likes and comments as id lists)
    CommentResponse  → comment create/get/delete, embedded in feed items
    FeedItem         → GET /api/posts/feed (owner and comments joined in)
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from app.schemas.common import StrictRequest, UserSummary


class CommentCreateRequest(StrictRequest):
    content: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    content: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary


class PostResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    image_url: str = Field(description="Path of the image under /uploads")
    caption: str = ""
    likes: List[uuid.UUID] = Field(default_factory=list, description="IDs of users who liked the post")
    like_count: int = 0
    comments: List[uuid.UUID] = Field(default_factory=list, description="Comment IDs, oldest first")
    created_at: datetime


class FeedItem(BaseModel):
    id: uuid.UUID
    image_url: str
    caption: str = ""
    created_at: datetime
    user: UserSummary
    likes: List[uuid.UUID] = Field(default_factory=list)
    like_count: int = 0
    comments: List[CommentResponse] = Field(default_factory=list)
