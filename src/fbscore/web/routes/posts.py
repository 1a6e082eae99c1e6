"""Social feed (/api/posts)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from fbscore.accounts.tokens import Principal
from fbscore.db.session import get_db
from fbscore.services.feed import FeedService
from fbscore.web import serializers
from fbscore.web.dependencies import require_poster, require_user
from fbscore.web.schemas import CommentRequest
from fbscore.web.uploads import KIND_POST, store_upload

router = APIRouter()


@router.post("/uploadPost")
async def upload_post(
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: Principal = Depends(require_poster),
    db: Session = Depends(get_db),
):
    post = FeedService(db).create_post(principal, description)
    post.image = await store_upload(image, KIND_POST)
    db.commit()
    return {"message": "Post uploaded successfully", "post": serializers.post(post)}


@router.get("/post")
async def all_posts(db: Session = Depends(get_db)):
    posts = FeedService(db).list_posts()
    return {"response": {"posts": [serializers.post(p) for p in posts]}}


@router.get("/myPosts")
async def my_posts(
    principal: Principal = Depends(require_poster),
    db: Session = Depends(get_db),
):
    posts = FeedService(db).posts_by(principal)
    return {"posts": [serializers.post(p) for p in posts]}


@router.delete("/deletePost/{post_id}")
async def delete_post(
    post_id: int,
    principal: Principal = Depends(require_poster),
    db: Session = Depends(get_db),
):
    FeedService(db).delete_post(post_id, principal)
    db.commit()
    return {"message": "Post deleted successfully."}


@router.post("/likePost/{post_id}")
async def like_post(
    post_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    liked, likes = FeedService(db).toggle_like(post_id, principal.id)
    db.commit()
    message = "Post liked successfully." if liked else "Post disliked successfully."
    return {"message": message, "liked": liked, "likes": likes}


@router.post("/addComments/{post_id}")
async def add_comment(
    post_id: int,
    body: CommentRequest,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    comment = FeedService(db).add_comment(post_id, principal.id, body.comment)
    db.commit()
    return {"message": "Comment added successfully.", "commentId": comment.id}


@router.delete("/deleteComment/{post_id}/{comment_id}")
async def delete_comment(
    post_id: int,
    comment_id: int,
    principal: Principal = Depends(require_poster),
    db: Session = Depends(get_db),
):
    FeedService(db).delete_comment(post_id, comment_id, principal)
    db.commit()
    return {"message": "Comment deleted successfully."}
