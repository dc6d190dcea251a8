from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.convertors import Convertor, register_url_convertor
from school_directory.core.constants import DEFAULT_PAGE_SIZE, MAX_IMAGE_SIZE_BYTES
from school_directory.core.exceptions import InvalidArgumentError
from school_directory.middleware.exceptions import validation_error_response
from school_directory.schemas.response import APIResponse
from school_directory.schemas.school import School, SchoolCreated, SchoolDetail, SchoolPage
from school_directory.services.s3_service import S3Service
from school_directory.services.school import ImageUpload, school_service
from school_directory.utils import deps
from school_directory.validation.school import validate_school, validation_rules

class SchoolIdConvertor(Convertor):
    """Any path segment except ``add``, so a GET on the add route stays a 405."""
    regex = "(?!add$)[^/]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: Any) -> str:
        return str(value)

register_url_convertor("school_id", SchoolIdConvertor())

router = APIRouter()

def _int_or_default(value: Optional[str], default: int) -> int:
    """Non-numeric paging values fall back to the default; numeric ones are range checked later."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default

@router.post("/add", status_code=status.HTTP_201_CREATED, response_model=APIResponse[SchoolCreated])
async def add_school(
    request: Request,
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    contact: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(deps.get_db),
    storage: S3Service = Depends(deps.get_image_storage),
):
    """Register a school from a multipart form, with an optional image."""
    candidate = {
        "name": name,
        "address": address,
        "city": city,
        "state": state,
        "contact": contact,
        "email": email,
    }

    upload = None
    # Browsers send an empty part without a filename when no file was picked
    if image is not None and image.filename:
        # One byte past the limit is enough to reject an oversized file
        data = await image.read(MAX_IMAGE_SIZE_BYTES + 1)
        upload = ImageUpload(data=data, filename=image.filename, content_type=image.content_type)

    result = validate_school(candidate, upload.candidate if upload else None)
    if not result.is_valid:
        return validation_error_response(request, result.errors)

    created = await run_in_threadpool(
        school_service.create_school,
        db,
        school_in=result.school,
        image=upload,
        storage=storage,
    )
    return APIResponse(message="School added successfully", data=created)

@router.get("", response_model=APIResponse[SchoolPage])
def list_schools(
    *,
    db: Session = Depends(deps.get_db),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    """List schools, most recently added first."""
    school_page = school_service.list_schools(
        db, page=_int_or_default(page, 1), limit=_int_or_default(limit, DEFAULT_PAGE_SIZE)
    )
    message = "Schools fetched successfully" if school_page.total > 0 else "No schools found"
    return APIResponse(message=message, data=school_page)

@router.get("/validation-rules", response_model=APIResponse[Dict[str, Any]])
def get_validation_rules():
    return APIResponse(message="Validation rules retrieved successfully", data=validation_rules())

@router.get("/{school_id:school_id}", response_model=APIResponse[SchoolDetail])
def read_school(
    *,
    db: Session = Depends(deps.get_db),
    school_id: str
):
    """Get a school by ID."""
    try:
        parsed_id = int(school_id)
    except ValueError:
        raise InvalidArgumentError("Invalid school ID")
    school = school_service.get_school(db, school_id=parsed_id)
    return APIResponse(
        message="School details fetched successfully",
        data=SchoolDetail(school=School.model_validate(school)),
    )
