from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union
from school_directory.core.constants import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE_BYTES, IndianStateEnum

NAME_PATTERN = r"^[a-zA-Z\s.'-]+$"
CITY_PATTERN = r"^[a-zA-Z\s'-]+$"
CONTACT_PATTERN = r"^[6-9][0-9]{9}$"
EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class SchoolBase(BaseModel):
    name: str
    address: str
    city: str
    state: str
    contact: str
    email: str

class SchoolCreate(SchoolBase):
    name: str = Field(min_length=2, max_length=100, pattern=NAME_PATTERN)
    address: str = Field(min_length=10, max_length=200)
    city: str = Field(min_length=2, max_length=50, pattern=CITY_PATTERN)
    state: IndianStateEnum
    contact: str = Field(pattern=CONTACT_PATTERN)
    email: str = Field(max_length=100, pattern=EMAIL_PATTERN)
    image: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)

class SchoolImage(BaseModel):
    """Facts about an uploaded image, checked before it reaches the blob store."""
    size: int = Field(ge=0, le=MAX_IMAGE_SIZE_BYTES)
    content_type: str

    @field_validator("content_type", mode="before")
    @classmethod
    def check_content_type(cls, v):
        v = (v or "").lower()
        if v not in ALLOWED_IMAGE_TYPES:
            raise ValueError(f"unsupported image type '{v}'")
        return v

class School(SchoolBase):
    id: int
    image: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

class SchoolCreated(BaseModel):
    id: int
    image_url: Optional[str] = None
    model_config = camel_config

class SchoolDetail(BaseModel):
    school: School

class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    limit: int
    has_next_page: bool
    has_previous_page: bool
    page_window: List[Union[int, str]] = []
    model_config = camel_config

class SchoolPage(BaseModel):
    schools: List[School]
    total: int
    pagination: PaginationMeta
