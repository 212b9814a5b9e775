import logging

from fastapi import APIRouter, status

from postbatch.model.post import HealthResponse

router = APIRouter(prefix="/api")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
def healthcheck():
    logging.info("healthcheck")
    return HealthResponse(status="UP", message="Posts API is running")
