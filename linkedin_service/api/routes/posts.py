"""
Post routes
"""
from fastapi import APIRouter, Depends, Query, status

from ...config import settings
from ...domain.models import User
from ...schemas import (
    PostCreate, CommentCreate,
    ApiResponse, PostData, PostListData, TrendingData, LikeData, CommentData, AnalyticsData,
    PostResponse, CommentResponse, PaginationResponse, PostAnalyticsResponse, MessageResponse,
)
from ...application.services import PostService, FeedService
from ..dependencies import get_post_service, get_feed_service, get_current_user


router = APIRouter(prefix="/posts", tags=["Posts"])


def _post_list(posts, pagination) -> PostListData:
    return PostListData(
        posts=[PostResponse.from_domain(p) for p in posts],
        pagination=PaginationResponse.from_domain(pagination)
    )


@router.get("", response_model=ApiResponse[PostListData])
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    feed_service: FeedService = Depends(get_feed_service)
):
    """
    Public feed of active posts, newest first

    - **page**: Page number (1-based)
    - **limit**: Posts per page
    """
    posts, pagination = await feed_service.list_posts(page=page, limit=limit)
    return ApiResponse(data=_post_list(posts, pagination))


@router.get("/trending", response_model=ApiResponse[TrendingData])
async def get_trending(feed_service: FeedService = Depends(get_feed_service)):
    """
    Most liked posts of the last 24 hours

    Ties are broken by comments, then by recency.
    """
    posts = await feed_service.get_trending()
    return ApiResponse(data=TrendingData(posts=[PostResponse.from_domain(p) for p in posts]))


@router.get("/user/feed", response_model=ApiResponse[PostListData])
async def get_user_feed(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    feed_service: FeedService = Depends(get_feed_service)
):
    """
    Personal feed

    Requires authentication. Without a follow graph this is the public feed.
    """
    posts, pagination = await feed_service.list_posts(page=page, limit=limit)
    return ApiResponse(data=_post_list(posts, pagination))


@router.get("/{post_id}", response_model=ApiResponse[PostData])
async def get_post(
    post_id: str,
    post_service: PostService = Depends(get_post_service)
):
    """Get a single active post"""
    post = await post_service.get_post(post_id)
    return ApiResponse(data=PostData(post=PostResponse.from_domain(post)))


@router.get("/{post_id}/analytics", response_model=ApiResponse[AnalyticsData])
async def get_post_analytics(
    post_id: str,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Engagement breakdown of a post

    Requires authentication. Only the author can view analytics.
    """
    post, analytics = await post_service.get_analytics(post_id, current_user.id)
    return ApiResponse(
        data=AnalyticsData(
            post=PostResponse.from_domain(post),
            analytics=PostAnalyticsResponse.from_domain(analytics)
        )
    )


@router.post("", response_model=ApiResponse[PostData], status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Create a new post

    - **content**: 1-1000 characters after trimming
    """
    post = await post_service.create_post(current_user.id, post_data.content)
    return ApiResponse(
        message="Post created successfully",
        data=PostData(post=PostResponse.from_domain(post))
    )


@router.put("/{post_id}", response_model=ApiResponse[PostData])
async def update_post(
    post_id: str,
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Update a post

    Only the author can update the post.
    """
    post = await post_service.update_post(post_id, current_user.id, post_data.content)
    return ApiResponse(
        message="Post updated successfully",
        data=PostData(post=PostResponse.from_domain(post))
    )


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Delete a post

    Only the author can delete the post. The post is hidden, not removed.
    """
    await post_service.delete_post(post_id, current_user.id)
    return MessageResponse(message="Post deleted successfully")


@router.put("/{post_id}/like", response_model=ApiResponse[LikeData])
async def toggle_like(
    post_id: str,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Like or unlike a post

    Calling twice returns the post to its original state.
    """
    post, is_liked = await post_service.toggle_like(post_id, current_user.id)
    return ApiResponse(
        message=f"Post {'liked' if is_liked else 'unliked'} successfully",
        data=LikeData(
            post=PostResponse.from_domain(post),
            is_liked=is_liked,
            likes_count=post.likes_count
        )
    )


@router.post(
    "/{post_id}/comments",
    response_model=ApiResponse[CommentData],
    status_code=status.HTTP_201_CREATED
)
async def add_comment(
    post_id: str,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Comment on a post

    - **text**: 1-500 characters after trimming
    """
    post, comment = await post_service.add_comment(post_id, current_user.id, comment_data.text)
    return ApiResponse(
        message="Comment added successfully",
        data=CommentData(
            post=PostResponse.from_domain(post),
            comment=CommentResponse.from_domain(comment)
        )
    )


@router.delete("/{post_id}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Delete a comment

    Only the comment's author can delete it.
    """
    await post_service.remove_comment(post_id, comment_id, current_user.id)
    return MessageResponse(message="Comment deleted successfully")
