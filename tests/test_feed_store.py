import asyncio

from repositories import SqlitePostRepository
from state import FeedStore, create_client
from state.models import MediaFile
from tests.conftest import DEFAULT_PASSWORD, make_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


async def signed_in_client(identifier):
    client = create_client()
    await client.auth.sign_in(identifier, DEFAULT_PASSWORD)
    return client


def test_load_marks_viewer_likes():
    author = make_user("alice")
    viewer = make_user("bob")
    repo = SqlitePostRepository()
    liked = repo.create(author["id"], "liked")
    repo.create(author["id"], "not liked")
    repo.add_like(liked["id"], viewer["id"])

    async def scenario():
        feed = FeedStore(await signed_in_client("bob"))
        assert await feed.load(author["id"], viewer["id"])
        return feed

    feed = asyncio.run(scenario())
    assert [p.content for p in feed.posts] == ["not liked", "liked"]
    assert [p.user_liked for p in feed.posts] == [False, True]
    assert feed.loading is False


def test_double_toggle_restores_like_state():
    author = make_user("alice")
    viewer = make_user("bob")
    post = SqlitePostRepository().create(author["id"], "hello")

    async def scenario():
        feed = FeedStore(await signed_in_client("bob"))
        await feed.load(author["id"], viewer["id"])
        before = feed.get(post["id"]).model_copy()
        assert await feed.toggle_like(post["id"], viewer["id"])
        middle = feed.get(post["id"]).model_copy()
        assert await feed.toggle_like(post["id"], viewer["id"])
        return before, middle, feed.get(post["id"])

    before, middle, after = asyncio.run(scenario())
    assert (middle.likes_count, middle.user_liked) == (1, True)
    assert (after.likes_count, after.user_liked) == (before.likes_count, before.user_liked)


def test_concurrent_toggles_apply_once():
    author = make_user("alice")
    viewer = make_user("bob")
    post = SqlitePostRepository().create(author["id"], "hello")

    async def scenario():
        feed = FeedStore(await signed_in_client("bob"))
        await feed.load(author["id"], viewer["id"])
        results = await asyncio.gather(
            feed.toggle_like(post["id"], viewer["id"]),
            feed.toggle_like(post["id"], viewer["id"]),
        )
        return feed, results

    feed, results = asyncio.run(scenario())
    assert sorted(results) == [False, True]
    assert feed.get(post["id"]).likes_count == 1
    assert feed.get(post["id"]).user_liked is True
    assert SqlitePostRepository().get(post["id"])["likes_count"] == 1


def test_stale_like_state_resyncs():
    author = make_user("alice")
    viewer = make_user("bob")
    repo = SqlitePostRepository()
    post = repo.create(author["id"], "hello")

    async def scenario():
        feed = FeedStore(await signed_in_client("bob"))
        await feed.load(author["id"], viewer["id"])
        # Liked from another device after the feed loaded
        repo.add_like(post["id"], viewer["id"])
        changed = await feed.toggle_like(post["id"], viewer["id"])
        return feed, changed

    feed, changed = asyncio.run(scenario())
    assert changed is False
    assert feed.get(post["id"]).user_liked is True
    assert feed.get(post["id"]).likes_count == 1


def test_create_prepends_and_uploads_media():
    author = make_user("alice")

    async def scenario():
        feed = FeedStore(await signed_in_client("alice"))
        await feed.load(author["id"], author["id"])
        first = await feed.create("first")
        second = await feed.create("", MediaFile(filename="chart.jpg", content=PNG_BYTES))
        skipped = await feed.create("   ")
        return feed, first, second, skipped

    feed, first, second, skipped = asyncio.run(scenario())
    assert skipped is None
    assert [p.id for p in feed.posts] == [second.id, first.id]
    assert second.image_url.endswith(".jpg")
    assert (first.likes_count, first.comments_count, first.user_liked) == (0, 0, False)
    assert feed.uploading is False


def test_update_and_delete_own_post():
    author = make_user("alice")
    prompts = []

    def confirm(message):
        prompts.append(message)
        return len(prompts) > 1

    async def scenario():
        feed = FeedStore(await signed_in_client("alice"), confirm=confirm)
        post = await feed.create("draft")
        assert await feed.update(post.id, "final")
        assert feed.get(post.id).content == "final"
        assert feed.banner.success == "Post updated successfully!"

        assert not await feed.delete(post.id)
        assert feed.get(post.id) is not None
        assert await feed.delete(post.id)
        return feed, post

    feed, post = asyncio.run(scenario())
    assert prompts == ["Are you sure you want to delete this post?"] * 2
    assert feed.get(post.id) is None
    assert SqlitePostRepository().get(post.id) is None


def test_cannot_edit_someone_elses_post():
    author = make_user("alice")
    make_user("bob")
    post = SqlitePostRepository().create(author["id"], "mine")

    async def scenario():
        client = await signed_in_client("bob")
        feed = FeedStore(client)
        await feed.load(author["id"], None)
        return feed, await feed.update(post["id"], "hijacked")

    feed, updated = asyncio.run(scenario())
    assert updated is False
    assert feed.banner.error == "You can only edit your own posts"
    assert SqlitePostRepository().get(post["id"])["content"] == "mine"


def test_create_requires_session():
    async def scenario():
        feed = FeedStore(create_client())
        return feed, await feed.create("hello")

    feed, post = asyncio.run(scenario())
    assert post is None
    assert feed.banner.error == "Not authenticated"


def test_cannot_delete_or_edit_uncached_post_of_someone_else():
    author = make_user("alice")
    make_user("bob")
    post = SqlitePostRepository().create(author["id"], "mine")

    async def scenario():
        feed = FeedStore(await signed_in_client("bob"))
        deleted = await feed.delete(post["id"])
        delete_error = feed.banner.error
        updated = await feed.update(post["id"], "hijacked")
        return feed, deleted, delete_error, updated

    feed, deleted, delete_error, updated = asyncio.run(scenario())
    assert deleted is False and updated is False
    assert delete_error == "You can only delete your own posts"
    assert feed.banner.error == "You can only edit your own posts"
    assert SqlitePostRepository().get(post["id"])["content"] == "mine"


def test_delete_uncached_own_post_and_missing_post():
    author = make_user("alice")
    post = SqlitePostRepository().create(author["id"], "mine")

    async def scenario():
        feed = FeedStore(await signed_in_client("alice"))
        deleted = await feed.delete(post["id"])
        missing = await feed.delete(post["id"])
        return feed, deleted, missing

    feed, deleted, missing = asyncio.run(scenario())
    assert deleted is True
    assert missing is False
    assert feed.banner.error == "Post not found"
    assert SqlitePostRepository().get(post["id"]) is None
