"""Social feed: posts by users or teams, with likes and comments from users."""

import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from fbscore.accounts.tokens import ROLE_TEAM, ROLE_USER, Principal
from fbscore.db.models import Post, PostComment, PostLike
from fbscore.errors import NotFound, PermissionDenied, ValidationFailed
from fbscore.services.common import get_or_404

logger = logging.getLogger(__name__)


def is_author(post: Post, principal: Principal) -> bool:
    if principal.role == ROLE_USER:
        return post.user_id == principal.id
    if principal.role == ROLE_TEAM:
        return post.team_id == principal.id
    return False


class FeedService:
    """Service for the public feed and its moderation."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Post).options(
            joinedload(Post.user),
            joinedload(Post.team),
            selectinload(Post.likes),
            selectinload(Post.comments).joinedload(PostComment.user),
        )

    def create_post(self, author: Principal, description: Optional[str], image: Optional[str] = None) -> Post:
        """
        Publish a post as a user or a team.

        Raises:
            ValidationFailed: Empty description
            PermissionDenied: Caller is neither a user nor a team
        """
        description = (description or "").strip()
        if not description:
            raise ValidationFailed("Please enter a description.")
        if author.role not in (ROLE_USER, ROLE_TEAM):
            raise PermissionDenied("Only users and teams can post")

        post = Post(
            user_id=author.id if author.role == ROLE_USER else None,
            team_id=author.id if author.role == ROLE_TEAM else None,
            image=image,
            description=description,
        )
        self.db.add(post)
        self.db.flush()
        logger.info("%s %d published post %d", author.role, author.id, post.id)
        return post

    def list_posts(self) -> list[Post]:
        """Every post, newest first."""
        return self._query().order_by(Post.date.desc(), Post.id.desc()).all()

    def posts_by(self, author: Principal) -> list[Post]:
        query = self._query()
        if author.role == ROLE_TEAM:
            query = query.filter(Post.team_id == author.id)
        else:
            query = query.filter(Post.user_id == author.id)
        return query.order_by(Post.date.desc(), Post.id.desc()).all()

    def get_post(self, post_id: int) -> Post:
        post = self._query().filter(Post.id == post_id).first()
        if post is None:
            raise NotFound("Post", post_id)
        return post

    def delete_post(self, post_id: int, author: Optional[Principal] = None) -> None:
        """
        Delete a post with its likes and comments.

        Without ``author`` (admin moderation) any post may be deleted.

        Raises:
            NotFound: No such post
            PermissionDenied: Caller did not write the post
        """
        post = get_or_404(self.db, Post, post_id, "Post")
        if author is not None and not is_author(post, author):
            raise PermissionDenied("You are not authorized to delete this post.")
        self.db.delete(post)
        self.db.flush()
        logger.info("Deleted post %d", post_id)

    def toggle_like(self, post_id: int, user_id: int) -> tuple[bool, int]:
        """
        Like the post, or remove the like if the user already liked it.

        Returns:
            (liked, like_count) after the change
        """
        post = get_or_404(self.db, Post, post_id, "Post")
        existing = (
            self.db.query(PostLike)
            .filter(PostLike.post_id == post.id, PostLike.user_id == user_id)
            .first()
        )
        if existing is not None:
            self.db.delete(existing)
            liked = False
        else:
            self.db.add(PostLike(post_id=post.id, user_id=user_id))
            liked = True
        self.db.flush()

        count = self.db.query(PostLike).filter(PostLike.post_id == post.id).count()
        return liked, count

    def add_comment(self, post_id: int, user_id: int, comment: Optional[str]) -> PostComment:
        comment = (comment or "").strip()
        if not comment:
            raise ValidationFailed("Comment is required.")
        post = get_or_404(self.db, Post, post_id, "Post")

        row = PostComment(post_id=post.id, user_id=user_id, comment=comment)
        self.db.add(row)
        self.db.flush()
        return row

    def delete_comment(self, post_id: int, comment_id: int, caller: Principal) -> None:
        """
        Remove a comment. Allowed for the commenter and the post's author.

        Raises:
            NotFound: No such post, or the comment is not on that post
            PermissionDenied: Caller is neither commenter nor author
        """
        post = get_or_404(self.db, Post, post_id, "Post")
        comment = self.db.get(PostComment, comment_id)
        if comment is None or comment.post_id != post.id:
            raise NotFound("Comment", comment_id)

        is_commenter = caller.role == ROLE_USER and comment.user_id == caller.id
        if not is_commenter and not is_author(post, caller):
            raise PermissionDenied("You are not authorized to delete this comment")

        self.db.delete(comment)
        self.db.flush()
