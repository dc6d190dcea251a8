import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session

from school_directory.core.constants import MAX_SCHOOL_ID
from school_directory.core.exceptions import InvalidArgumentError, SchoolNotFoundError
from school_directory.crud.school import school as crud_school
from school_directory.models.school import School
from school_directory.schemas.school import School as SchoolSchema, SchoolCreate, SchoolCreated, SchoolPage
from school_directory.services.s3_service import S3Service
from school_directory.utils.pagination import check_page_args, compute_pagination, page_offset
from school_directory.validation.school import ImageCandidate

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    filename: str
    content_type: Optional[str]

    @property
    def candidate(self) -> ImageCandidate:
        return ImageCandidate(filename=self.filename, content_type=self.content_type, size=len(self.data))

class SchoolService:

    def create_school(
        self, db: Session, *, school_in: SchoolCreate, storage: S3Service, image: Optional[ImageUpload] = None
    ) -> SchoolCreated:
        """Persist a validated school, uploading its image first when one is given."""
        image_url = None
        if image is not None:
            image_url = storage.upload_image(image.data, image.filename, image.content_type)
            school_in = school_in.model_copy(update={"image": image_url})

        new_school = crud_school.create(db, obj_in=school_in)
        logger.info(f"Created school {new_school.id} ({new_school.name})")
        return SchoolCreated(id=new_school.id, image_url=image_url)

    def get_school(self, db: Session, *, school_id: int) -> School:
        if school_id < 1:
            raise InvalidArgumentError("Invalid school ID")
        # Ids past the column range can never have been assigned
        if school_id > MAX_SCHOOL_ID:
            raise SchoolNotFoundError(school_id)
        school = crud_school.get(db, id=school_id)
        if not school:
            raise SchoolNotFoundError(school_id)
        return school

    def list_schools(self, db: Session, *, page: int = 1, limit: int = 10) -> SchoolPage:
        check_page_args(page, limit)

        # count() and get_page() are separate reads; an insert in between can leave total one behind
        total = crud_school.count(db)
        offset = page_offset(page, limit)
        schools = crud_school.get_page(db, skip=offset, limit=limit) if offset < total else []

        return SchoolPage(
            schools=[SchoolSchema.model_validate(s) for s in schools],
            total=total,
            pagination=compute_pagination(total, page, limit),
        )

school_service = SchoolService()
