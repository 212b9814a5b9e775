import logging
from typing import List, Optional

from postbatch.db import post_db
from postbatch.model.post import Post, PostPage
from postbatch.service.post_source_client import PostSourceClient, get_post_source_client

logger = logging.getLogger(__name__)


class PostService:
    """
    Fetch-then-persist and paginated-read use cases for posts.

    Errors from the post source or the store propagate unchanged.
    """

    def __init__(self, source_client: Optional[PostSourceClient] = None):
        """
        Args:
            source_client: Client to fetch with. If not provided, a short-lived
                client is opened for each fetch.
        """
        self.source_client = source_client

    async def fetch_posts(self, count: int) -> List[Post]:
        if self.source_client is not None:
            return await self.source_client.fetch_posts(count)
        async with get_post_source_client() as client:
            return await client.fetch_posts(count)

    async def batch_insert(self, post_number: int) -> int:
        logger.info(f"Starting batch insert for {post_number} posts")

        posts = await self.fetch_posts(post_number)
        if len(posts) < post_number:
            logger.warning(f"Requested {post_number} posts but the source only returned {len(posts)}")

        logger.info(f"Fetched {len(posts)} posts, saving to database...")
        await post_db.save_all_posts(posts)
        logger.info(f"Successfully saved {len(posts)} posts")
        return len(posts)

    async def fetch_records(self, page: int, size: int) -> PostPage:
        logger.info(f"Fetching page {page} with size {size}")
        return await post_db.find_posts_paginated(page, size)


def get_post_service() -> PostService:
    return PostService()
