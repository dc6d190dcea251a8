from contextlib import asynccontextmanager
from typing import Optional
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from school_directory.core.config import Settings, get_settings
from school_directory.core.database import Base, build_engine, build_session_factory
from school_directory.core.exceptions import SchoolDirectoryError
from school_directory.core.logging import configure_logging
from school_directory.endpoints import school
from school_directory.middleware.exceptions import (
    global_exception_handler,
    http_exception_handler,
    school_directory_exception_handler,
    validation_exception_handler,
)
from school_directory.middleware.logging import RequestLoggingMiddleware
from school_directory.services.s3_service import S3Service

logger = logging.getLogger("school_directory")


def create_app(settings: Settings, image_storage: Optional[S3Service] = None) -> FastAPI:
    configure_logging(settings)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
        yield
        engine.dispose()
        logger.info(f"{settings.PROJECT_NAME} shut down")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.image_storage = image_storage or S3Service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(SchoolDirectoryError, school_directory_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(school.router, prefix=f"{settings.API_PREFIX}/schools", tags=["Schools"])

    return app


app = create_app(get_settings())

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
