from dotenv import load_dotenv

load_dotenv()

import logging
import os
from contextlib import asynccontextmanager

# Import third-party libraries
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette import status

# Configure basic logging before importing application modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
    force=True,
)

from postbatch.api import healthcheck_api, posts_api
from postbatch.database import close_database, init_database

# Configure uvicorn access logger
logging.getLogger("uvicorn.access").setLevel(logging.INFO)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application initialization...")

    # --- Startup code ---
    try:
        await init_database()
        logger.info("Database connection initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database connection: %s", str(e), exc_info=True)
        raise

    # --- Application is running ---
    yield

    # --- Shutdown code ---
    logger.info("Closing database connection...")
    await close_database()
    logger.info("Application shutdown complete.")


app = FastAPI(title="Posts API", lifespan=lifespan)

app.include_router(healthcheck_api.router)
app.include_router(posts_api.router)

# Enable CORS for all domains
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Enable gzip compression middleware
app.add_middleware(GZipMiddleware, minimum_size=500)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exception: RequestValidationError):
    if not request.url.path.startswith("/api"):
        return await request_validation_exception_handler(request, exception)

    fields = ", ".join(str((error.get("loc") or ("request",))[-1]) for error in exception.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": f"Invalid request parameter: {fields}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exception: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exception)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "error": "InternalServerError"},
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
