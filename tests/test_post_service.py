"""Posts, likes and comments."""
import uuid

import pytest
from sqlalchemy import func, select

from campuscircle.core.exceptions import ConflictError, EmptyContent, ForbiddenError, NotFoundError, ValidationError
from campuscircle.db.base import utcnow
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.post import Post, PostComment, PostLike
from campuscircle.schemas.post import PostResponse
from campuscircle.services import post_service


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar()


@pytest.fixture
async def meera_post(db_session, accounts):
    return await post_service.create_post(db_session, accounts["23CAU001"].id, "  Hello campus!  ")


async def test_create_post_trims_content(meera_post, accounts):
    assert meera_post.content == "Hello campus!"
    assert meera_post.image_url == ""
    assert meera_post.user.username == "23CAU001"
    assert meera_post.likes == []
    assert meera_post.comments == []


@pytest.mark.parametrize("content", ["", "   ", None])
async def test_create_post_requires_content(db_session, accounts, content):
    with pytest.raises(EmptyContent) as exc_info:
        await post_service.create_post(db_session, accounts["23CAU001"].id, content)

    assert exc_info.value.detail == "Content is required"
    assert await _count(db_session, Post) == 0


async def test_create_post_rejects_oversized_content(db_session, accounts):
    with pytest.raises(ValidationError):
        await post_service.create_post(db_session, accounts["23CAU001"].id, "x" * 5001)


async def test_feed_is_newest_first_and_paged(db_session, accounts):
    author = accounts["21CAU001"].id
    for i in range(5):
        await post_service.create_post(db_session, author, f"post {i}")

    page_one, total = await post_service.list_feed(db_session, page=1, limit=2)
    page_three, _ = await post_service.list_feed(db_session, page=3, limit=2)

    assert total == 5
    assert [p.content for p in page_one] == ["post 4", "post 3"]
    assert [p.content for p in page_three] == ["post 0"]


async def test_get_missing_post(db_session, accounts):
    with pytest.raises(NotFoundError) as exc_info:
        await post_service.get_post(db_session, uuid.uuid4())

    assert exc_info.value.detail == "Post not found"


async def test_update_post_by_owner(db_session, accounts, meera_post):
    updated = await post_service.update_post(
        db_session, meera_post.id, accounts["23CAU001"].id, content=" edited ", image_url="http://img/1.png"
    )

    assert updated.content == "edited"
    assert updated.image_url == "http://img/1.png"


async def test_update_post_rejects_blank_content(db_session, accounts, meera_post):
    with pytest.raises(EmptyContent):
        await post_service.update_post(db_session, meera_post.id, accounts["23CAU001"].id, content="  ")


async def test_update_post_by_stranger_forbidden(db_session, accounts, meera_post):
    with pytest.raises(ForbiddenError) as exc_info:
        await post_service.update_post(db_session, meera_post.id, accounts["21CAU001"].id, content="mine now")

    assert exc_info.value.detail == "Unauthorized"


async def test_like_toggles_membership(db_session, accounts, meera_post):
    rahul = accounts["21CAU001"].id

    liked = await post_service.toggle_like(db_session, meera_post.id, rahul)
    assert (liked.likes, liked.is_liked) == (1, True)

    post = await post_service.get_post(db_session, meera_post.id)
    assert post.liked_by == [rahul]
    assert PostResponse.from_post(post, rahul).is_liked is True
    assert PostResponse.from_post(post, accounts["23CAU001"].id).is_liked is False

    unliked = await post_service.toggle_like(db_session, meera_post.id, rahul)
    assert (unliked.likes, unliked.is_liked) == (0, False)
    assert await _count(db_session, PostLike) == 0


async def test_like_counts_distinct_users(db_session, accounts, meera_post):
    await post_service.toggle_like(db_session, meera_post.id, accounts["21CAU001"].id)
    result = await post_service.toggle_like(db_session, meera_post.id, accounts["21CAU002"].id)

    assert result.likes == 2


async def test_comments_keep_insertion_order(db_session, accounts, meera_post):
    for roll, text in [("21CAU001", "first"), ("21CAU002", "second"), ("23CAU001", "third")]:
        await post_service.add_comment(db_session, meera_post.id, accounts[roll].id, text)

    post = await post_service.get_post(db_session, meera_post.id)
    assert [c.content for c in post.comments] == ["first", "second", "third"]
    assert [c.position for c in post.comments] == [1, 2, 3]
    assert post.comments[0].user.username == "21CAU001"


async def test_comment_requires_content(db_session, accounts, meera_post):
    with pytest.raises(EmptyContent) as exc_info:
        await post_service.add_comment(db_session, meera_post.id, accounts["21CAU001"].id, "   ")

    assert exc_info.value.detail == "Comment content is required"


async def test_comment_on_missing_post(db_session, accounts):
    with pytest.raises(NotFoundError):
        await post_service.add_comment(db_session, uuid.uuid4(), accounts["21CAU001"].id, "hello?")


async def test_comment_deleted_by_author_or_post_owner(db_session, accounts, meera_post):
    rahul, priya, meera = (accounts[r].id for r in ("21CAU001", "21CAU002", "23CAU001"))
    by_rahul = await post_service.add_comment(db_session, meera_post.id, rahul, "nice")
    by_priya = await post_service.add_comment(db_session, meera_post.id, priya, "cool")

    # Author
    await post_service.delete_comment(db_session, meera_post.id, by_rahul.id, rahul)
    # Post owner
    await post_service.delete_comment(db_session, meera_post.id, by_priya.id, meera)

    assert await _count(db_session, PostComment) == 0


async def test_comment_delete_by_stranger_forbidden(db_session, accounts, meera_post):
    comment = await post_service.add_comment(db_session, meera_post.id, accounts["21CAU001"].id, "nice")

    with pytest.raises(ForbiddenError):
        await post_service.delete_comment(db_session, meera_post.id, comment.id, accounts["21CAU002"].id)


async def test_comment_of_another_post_is_missing(db_session, accounts, meera_post):
    other = await post_service.create_post(db_session, accounts["21CAU001"].id, "other post")
    comment = await post_service.add_comment(db_session, other.id, accounts["21CAU001"].id, "on other")

    with pytest.raises(NotFoundError) as exc_info:
        await post_service.delete_comment(db_session, meera_post.id, comment.id, accounts["21CAU001"].id)

    assert exc_info.value.detail == "Comment not found"


async def test_delete_post_removes_comments_and_likes(db_session, accounts, meera_post):
    meera, rahul = accounts["23CAU001"].id, accounts["21CAU001"].id
    await post_service.toggle_like(db_session, meera_post.id, rahul)
    await post_service.add_comment(db_session, meera_post.id, rahul, "nice")

    await post_service.delete_post(db_session, meera_post.id, meera)

    assert await _count(db_session, Post) == 0
    assert await _count(db_session, PostComment) == 0
    assert await _count(db_session, PostLike) == 0


async def test_delete_post_ownership(db_session, accounts, meera_post):
    with pytest.raises(ForbiddenError):
        await post_service.delete_post(db_session, meera_post.id, accounts["21CAU001"].id)

    await post_service.delete_post(db_session, meera_post.id, accounts["ADMIN001"].id, privileged=True)
    assert await _count(db_session, Post) == 0


async def test_stale_post_edit_conflicts(db_session, session_factory, accounts, meera_post):
    meera = accounts["23CAU001"].id

    async with session_factory() as other:
        stale = await post_service.get_post(other, meera_post.id)

        await post_service.update_post(db_session, meera_post.id, meera, content="first edit")

        stale.content = "second edit"
        with pytest.raises(ConflictError):
            await commit_or_conflict(other, "Post was modified concurrently, please retry")

    post = await post_service.get_post(db_session, meera_post.id)
    assert post.content == "first edit"


async def test_concurrent_comment_appends_conflict(db_session, session_factory, accounts, meera_post):
    rahul, priya = accounts["21CAU001"].id, accounts["21CAU002"].id

    async with session_factory() as other:
        stale = await post_service.get_post(other, meera_post.id)

        await post_service.add_comment(db_session, meera_post.id, rahul, "first")

        # Same steps as add_comment, against the copy loaded before the first append
        stale.comments.append(PostComment(post_id=stale.id, user_id=priya, content="second", position=1))
        stale.updated_at = utcnow()
        with pytest.raises(ConflictError):
            await commit_or_conflict(other, "Post was modified concurrently, please retry")

        # A retry reloads the post and lands after the first comment
        comment = await post_service.add_comment(other, meera_post.id, priya, "second")
        assert comment.position == 2

    post = await post_service.get_post(db_session, meera_post.id)
    assert [c.content for c in post.comments] == ["first", "second"]
