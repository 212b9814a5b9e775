import logging
from typing import List, Optional

from postbatch.database import get_database
from postbatch.model.post import MAX_BODY_LENGTH, Post, PostPage
from postbatch.model.post_errors import StorageError

logger = logging.getLogger(__name__)

UPSERT_POST = """
INSERT INTO posts (id, user_id, title, body)
VALUES (:id, :user_id, :title, :body)
ON CONFLICT (id)
DO UPDATE SET
    user_id = EXCLUDED.user_id,
    title = EXCLUDED.title,
    body = EXCLUDED.body
"""


def _post_values(post: Post) -> dict:
    if len(post.body) > MAX_BODY_LENGTH:
        raise StorageError(
            f"Post {post.id} body is {len(post.body)} characters, limit is {MAX_BODY_LENGTH}"
        )
    return {
        "id": post.id,
        "user_id": post.user_id,
        "title": post.title,
        "body": post.body,
    }


def _row_to_post(row) -> Post:
    return Post(id=row["id"], user_id=row["user_id"], title=row["title"], body=row["body"])


async def save_post(post: Post):
    """Insert the post, or replace the stored one with the same id."""
    values = _post_values(post)
    try:
        await get_database().execute(query=UPSERT_POST, values=values)
    except Exception as e:
        raise StorageError(f"Error saving post {post.id}: {e}") from e


async def save_all_posts(posts: List[Post]):
    """
    Upsert every post in a single transaction.

    Either all posts are written or none are; a body over the column limit
    rejects the whole batch before the database is touched.
    """
    if not posts:
        return
    values = [_post_values(post) for post in posts]
    db = get_database()
    try:
        async with db.transaction():
            await db.execute_many(query=UPSERT_POST, values=values)
    except Exception as e:
        raise StorageError(f"Error saving {len(posts)} posts: {e}") from e


async def find_post_by_id(post_id: int) -> Optional[Post]:
    sql = """
    SELECT id, user_id, title, body
    FROM posts
    WHERE id = :post_id
    """
    try:
        row = await get_database().fetch_one(query=sql, values={"post_id": post_id})
    except Exception as e:
        raise StorageError(f"Error reading post {post_id}: {e}") from e
    return _row_to_post(row) if row else None


async def count_posts() -> int:
    try:
        total = await get_database().fetch_val(query="SELECT COUNT(*) FROM posts")
    except Exception as e:
        raise StorageError(f"Error counting posts: {e}") from e
    return int(total or 0)


async def find_posts_paginated(page: int, size: int) -> PostPage:
    sql = """
    SELECT id, user_id, title, body
    FROM posts
    ORDER BY id
    LIMIT :limit OFFSET :offset
    """
    total_elements = await count_posts()
    try:
        rows = await get_database().fetch_all(
            query=sql, values={"limit": size, "offset": page * size}
        )
    except Exception as e:
        raise StorageError(f"Error reading page {page} of posts: {e}") from e

    total_pages = -(-total_elements // size)
    logger.debug("Page %d/%d of posts holds %d rows", page, total_pages, len(rows))
    return PostPage(
        content=[_row_to_post(row) for row in rows],
        page=page,
        size=size,
        total_elements=total_elements,
        total_pages=total_pages,
    )
