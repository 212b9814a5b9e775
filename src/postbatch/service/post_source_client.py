import logging
import os
from typing import List, Optional

import httpx
from pydantic import ValidationError

from postbatch.model.post import Post
from postbatch.model.post_errors import UpstreamFetchError

logger = logging.getLogger(__name__)

POSTS_SOURCE_URL = "https://jsonplaceholder.typicode.com/posts"
DEFAULT_TIMEOUT = 10.0  # seconds


class PostSourceClient:
    """
    Client for the public post listing API.

    Issues a single GET per fetch and never retries. Every failure mode
    (transport error, timeout, non-2xx status, unparsable or mis-shaped body)
    surfaces as UpstreamFetchError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            base_url: URL returning a JSON array of posts. Defaults to POSTS_SOURCE_URL env or jsonplaceholder.
            timeout: Request timeout in seconds. Defaults to POSTS_SOURCE_TIMEOUT env or 10.0.
            client: Optional shared httpx.AsyncClient. If not provided, creates one.
        """
        self.base_url = base_url or os.getenv("POSTS_SOURCE_URL", POSTS_SOURCE_URL)
        self.timeout = timeout if timeout is not None else float(
            os.getenv("POSTS_SOURCE_TIMEOUT", DEFAULT_TIMEOUT)
        )
        self._owns_client = client is None

        if self._owns_client:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        else:
            self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client has been closed or was not initialized properly")
        return self._client

    async def close(self):
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch_posts(self, count: int) -> List[Post]:
        """
        Fetch the source listing and keep its first ``count`` posts.

        Raises:
            UpstreamFetchError: on any network, status or body problem
        """
        logger.info(f"Fetching posts from {self.base_url}")
        try:
            response = await self.client.get(self.base_url)
        except httpx.TimeoutException as e:
            raise UpstreamFetchError(f"Timed out after {self.timeout}s fetching {self.base_url}") from e
        except httpx.RequestError as e:
            raise UpstreamFetchError(f"Could not reach {self.base_url}: {e}") from e

        if not response.is_success:
            logger.error(f"Post source returned {response.status_code}: {response.text[:200]}")
            raise UpstreamFetchError(
                f"Post source returned status {response.status_code}",
                status_code=response.status_code,
            )

        payload = parse_json_response(response)
        if not isinstance(payload, list):
            raise UpstreamFetchError(
                f"Expected a JSON array of posts, got {type(payload).__name__}",
                status_code=response.status_code,
            )

        try:
            return [Post.model_validate(item) for item in payload[:count]]
        except ValidationError as e:
            raise UpstreamFetchError(f"Post source sent a malformed post: {e}") from e


def parse_json_response(response: httpx.Response):
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Failed to parse post source JSON response: {response.text[:200]}")
        raise UpstreamFetchError(
            f"Invalid JSON response from post source: {e}",
            status_code=response.status_code,
        ) from e


def get_post_source_client(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None
) -> PostSourceClient:
    return PostSourceClient(base_url=base_url, timeout=timeout, client=client)
