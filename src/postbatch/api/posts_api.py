import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from starlette import status

from postbatch.model.post import BatchInsertResponse, FetchRecordResponse
from postbatch.model.post_errors import InvalidRequestError, PostBatchError
from postbatch.service.post_service import PostService, get_post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

MAX_POST_NUMBER = 100
MAX_PAGE_SIZE = 100


def failure_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def validate_post_number(payload: Optional[Dict[str, Any]]) -> int:
    if not payload or "postNumber" not in payload:
        raise InvalidRequestError("Missing required field: postNumber")

    post_number = payload["postNumber"]
    # bool is an int subclass
    if not isinstance(post_number, int) or isinstance(post_number, bool) or post_number <= 0:
        raise InvalidRequestError("postNumber must be a positive integer")

    if post_number > MAX_POST_NUMBER:
        raise InvalidRequestError(f"postNumber cannot exceed {MAX_POST_NUMBER} (API limit)")

    return post_number


def validate_page_request(page: int, size: int):
    if page < 0:
        raise InvalidRequestError("Page number cannot be negative")
    if size <= 0 or size > MAX_PAGE_SIZE:
        raise InvalidRequestError(f"Size must be between 1 and {MAX_PAGE_SIZE}")


@router.post("/batch_insert", response_model=BatchInsertResponse)
async def batch_insert(
        payload: Optional[Dict[str, Any]] = Body(default=None),
        post_service: PostService = Depends(get_post_service),
):
    """
    Fetch postNumber posts from the post source and upsert them.
    """
    try:
        post_number = validate_post_number(payload)
    except InvalidRequestError as e:
        return failure_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        await post_service.batch_insert(post_number)
    except PostBatchError as e:
        logger.error(f"Batch insert of {post_number} posts failed: {e}", exc_info=True)
        return failure_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Error inserting posts: {e}",
            error=e.kind,
        )

    return BatchInsertResponse(
        message=f"Successfully inserted {post_number} posts",
        posts_inserted=post_number,
    )


@router.get("/fetch_record", response_model=FetchRecordResponse)
async def fetch_record(
        page: int = Query(
            default=0,
            description="Zero-based page number",
        ),
        size: int = Query(
            default=10,
            description="Number of posts per page (1-100)",
        ),
        post_service: PostService = Depends(get_post_service),
):
    """
    Get a page of stored posts ordered by id.
    """
    try:
        validate_page_request(page, size)
    except InvalidRequestError as e:
        return failure_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        posts_page = await post_service.fetch_records(page, size)
    except PostBatchError as e:
        logger.error(f"Fetching page {page} (size {size}) failed: {e}", exc_info=True)
        return failure_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Error fetching records: {e}",
            error=e.kind,
        )

    return FetchRecordResponse.from_page(posts_page)
