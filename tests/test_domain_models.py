"""
Unit tests for domain models and input cleaners
"""
from datetime import datetime

import pytest

from linkedin_service.domain.models import (
    Pagination, Post, Comment, User,
    clean_post_content, clean_comment_text, clean_name, clean_bio,
    POST_MAX_LENGTH, COMMENT_MAX_LENGTH,
)
from linkedin_service.exceptions import ValidationError


@pytest.mark.parametrize("page,limit,total,pages,has_next,has_prev", [
    (1, 10, 0, 0, False, False),
    (1, 10, 5, 1, False, False),
    (1, 10, 10, 1, False, False),
    (1, 10, 11, 2, True, False),
    (2, 10, 11, 2, False, True),
    (3, 10, 11, 2, False, True),
    (2, 5, 0, 0, False, True),
])
def test_pagination_flags(page, limit, total, pages, has_next, has_prev):
    pagination = Pagination(page=page, limit=limit, total=total)
    assert pagination.pages == pages
    assert pagination.has_next_page is has_next
    assert pagination.has_prev_page is has_prev


def test_post_counts_follow_collections():
    now = datetime.utcnow()
    post = Post(
        id="p1",
        author_id="a",
        content="hello",
        likes=["u1", "u2"],
        comments=[Comment(id="c1", user_id="u1", text="hi", created_at=now)],
    )
    assert post.likes_count == 2
    assert post.comments_count == 1
    assert post.is_liked_by("u2")
    assert not post.is_liked_by("a")
    assert post.is_author("a")
    assert post.find_comment("c1").is_author("u1")
    assert post.find_comment("missing") is None


def test_public_profile_drops_password_hash():
    user = User(id="1", name="Ann", email="ann@example.com", password_hash="secret")
    public = user.public_profile()
    assert public.password_hash is None
    assert public.email == "ann@example.com"


def test_post_content_boundaries():
    assert clean_post_content("  x  ") == "x"
    assert len(clean_post_content("a" * POST_MAX_LENGTH)) == POST_MAX_LENGTH

    with pytest.raises(ValidationError):
        clean_post_content("   ")
    with pytest.raises(ValidationError):
        clean_post_content("a" * (POST_MAX_LENGTH + 1))


def test_comment_text_boundaries():
    assert clean_comment_text("hi") == "hi"
    assert len(clean_comment_text("b" * COMMENT_MAX_LENGTH)) == COMMENT_MAX_LENGTH

    with pytest.raises(ValidationError):
        clean_comment_text("")
    with pytest.raises(ValidationError):
        clean_comment_text("b" * (COMMENT_MAX_LENGTH + 1))


def test_name_rules():
    assert clean_name("  Ada Lovelace ") == "Ada Lovelace"

    with pytest.raises(ValidationError):
        clean_name("A")
    with pytest.raises(ValidationError):
        clean_name("R2D2")
    with pytest.raises(ValidationError):
        clean_name("a" * 51)


def test_bio_rules():
    assert clean_bio(None) == ""
    assert clean_bio(" engineer ") == "engineer"

    with pytest.raises(ValidationError):
        clean_bio("x" * 301)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        clean_post_content("")
