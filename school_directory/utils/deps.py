from fastapi import Request

from school_directory.services.s3_service import S3Service

def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

def get_image_storage(request: Request) -> S3Service:
    return request.app.state.image_storage
