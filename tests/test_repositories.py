import pytest

from exceptions import ConflictError, InvalidInputError, NotFoundError
from repositories import SqliteCommentRepository, SqlitePostRepository, SqliteProfileRepository
from tests.conftest import make_user

posts = SqlitePostRepository()
comments = SqliteCommentRepository()
profiles = SqliteProfileRepository()


def test_posts_listed_newest_first():
    user = make_user("alice")
    first = posts.create(user["id"], "first")
    second = posts.create(user["id"], "second")
    assert [p["id"] for p in posts.list_by_author(user["id"])] == [second["id"], first["id"]]


def test_like_counts_follow_like_rows():
    author = make_user("alice")
    fan = make_user("bob")
    post = posts.create(author["id"], "hello")

    assert posts.add_like(post["id"], fan["id"]) == 1
    assert posts.liked_post_ids(fan["id"]) == {post["id"]}
    with pytest.raises(ConflictError):
        posts.add_like(post["id"], fan["id"])
    assert posts.get(post["id"])["likes_count"] == 1

    assert posts.remove_like(post["id"], fan["id"]) == 0
    # Removing a like that is not there leaves the count alone
    assert posts.remove_like(post["id"], fan["id"]) == 0
    assert posts.liked_post_ids(fan["id"]) == set()


def test_like_on_missing_post():
    user = make_user("alice")
    with pytest.raises(NotFoundError):
        posts.add_like(999, user["id"])


def test_replies_are_one_level_deep():
    user = make_user("alice")
    post = posts.create(user["id"], "hello")
    top = comments.create(post["id"], user["id"], "top")
    reply = comments.create(post["id"], user["id"], "reply", parent_comment_id=top["id"])

    assert reply["parent_comment_id"] == top["id"]
    with pytest.raises(InvalidInputError, match="more than one level deep"):
        comments.create(post["id"], user["id"], "nested", parent_comment_id=reply["id"])


def test_reply_parent_must_be_on_same_post():
    user = make_user("alice")
    post_a = posts.create(user["id"], "a")
    post_b = posts.create(user["id"], "b")
    top = comments.create(post_a["id"], user["id"], "top")
    with pytest.raises(InvalidInputError):
        comments.create(post_b["id"], user["id"], "reply", parent_comment_id=top["id"])


def test_comment_counts_and_cascading_delete():
    user = make_user("alice")
    post = posts.create(user["id"], "hello")
    top = comments.create(post["id"], user["id"], "top")
    other = comments.create(post["id"], user["id"], "other")
    comments.create(post["id"], user["id"], "r1", parent_comment_id=top["id"])
    comments.create(post["id"], user["id"], "r2", parent_comment_id=top["id"])
    assert posts.get(post["id"])["comments_count"] == 4

    assert comments.delete(top["id"]) == 3
    assert [c["id"] for c in comments.list_top_level(post["id"])] == [other["id"]]
    assert comments.list_replies(top["id"]) == []
    assert posts.get(post["id"])["comments_count"] == 1


def test_comment_likes():
    user = make_user("alice")
    post = posts.create(user["id"], "hello")
    comment = comments.create(post["id"], user["id"], "top")

    assert comments.add_like(comment["id"], user["id"]) == 1
    assert comments.liked_comment_ids(user["id"], [comment["id"]]) == {comment["id"]}
    assert comments.remove_like(comment["id"], user["id"]) == 0


def test_search_is_case_insensitive_and_capped():
    make_user("Kowse")
    make_user("kowalski")
    make_user("bob")
    for i in range(25):
        make_user(f"kow{i:02d}")

    results = profiles.search("KOW")
    assert len(results) == 20
    assert all("kow" in r["username"].lower() for r in results)
    assert {"id", "username", "bio", "avatar_url"} <= set(results[0])


def test_search_treats_wildcards_literally():
    make_user("under_dog")
    make_user("underxdog")
    assert [r["username"] for r in profiles.search("r_d")] == ["under_dog"]


def test_username_lookup_is_case_insensitive():
    user = make_user("Kowse")
    assert profiles.get_by_username("kOwSe")["id"] == user["id"]


def test_list_all_ordered_by_username():
    make_user("zed")
    make_user("amy")
    make_user("Kowse")
    assert [u["username"] for u in profiles.list_all()] == ["amy", "Kowse", "zed"]


def test_update_rejects_unknown_role():
    user = make_user("alice")
    with pytest.raises(InvalidInputError):
        profiles.update(user["id"], {"role": "emperor"})
    assert profiles.update(user["id"], {"role": "head"})["role"] == "head"
