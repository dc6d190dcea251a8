"""Field rules for a school record.

The rules live on the ``SchoolCreate`` and ``SchoolImage`` schemas. This module
runs them at the request boundary (``validate_school``) and exports them for
the UI (``validation_rules()``) so both sides stay in step. Nothing here
touches storage and nothing raises for bad input: an invalid candidate is
reported through ``ValidationResult.errors``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from school_directory.core.constants import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE_BYTES
from school_directory.schemas.school import SchoolCreate, SchoolImage

TEXT_FIELDS = ("name", "address", "city", "state", "contact", "email")

FIELD_LABELS = {
    "name": "School name",
    "address": "Address",
    "city": "City name",
    "contact": "Contact number",
    "email": "Email",
}

PATTERN_MESSAGES = {
    "name": "School name can only contain letters, spaces, periods, apostrophes, and hyphens",
    "city": "City name can only contain letters, spaces, apostrophes, and hyphens",
    "contact": "Please enter a valid 10-digit Indian mobile number starting with 6, 7, 8, or 9",
    "email": "Please enter a valid email address",
}

IMAGE_MESSAGES = {
    "size": "File size must be less than 4.5MB",
    "content_type": "Only JPEG, JPG, PNG, and GIF files are allowed",
}


@dataclass(frozen=True)
class ImageCandidate:
    filename: str
    content_type: Optional[str]
    size: int


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)
    school: Optional[SchoolCreate] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def cleaned(self) -> Dict[str, str]:
        if self.school is None:
            return {}
        return self.school.model_dump(mode="json", include=set(TEXT_FIELDS))


def _field_message(field_name: str, error: Dict[str, Any]) -> str:
    kind = error["type"]
    if field_name == "state":
        if kind == "missing":
            return "Please select a state"
        return f"'{error['input']}' is not a recognized state"

    label = FIELD_LABELS[field_name]
    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        return f"{label} must be at least {error['ctx']['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} must not exceed {error['ctx']['max_length']} characters"
    return PATTERN_MESSAGES.get(field_name, error["msg"])


def validate_image(image: ImageCandidate) -> Optional[str]:
    try:
        SchoolImage.model_validate(image, from_attributes=True)
    except ValidationError as e:
        # size is declared first, so an oversized file reports its size
        return IMAGE_MESSAGES[e.errors()[0]["loc"][0]]
    return None


def validate_school(candidate: Mapping[str, Any], image: Optional[ImageCandidate] = None) -> ValidationResult:
    """Check every field of ``candidate`` and report the first broken rule per field."""
    result = ValidationResult()

    # Blank and absent values are both reported as missing
    data = {}
    for field_name in TEXT_FIELDS:
        raw = candidate.get(field_name)
        if isinstance(raw, str) and raw.strip():
            data[field_name] = raw.strip()

    try:
        result.school = SchoolCreate.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            field_name = error["loc"][0]
            result.errors.setdefault(field_name, _field_message(field_name, error))

    if image is not None:
        error = validate_image(image)
        if error:
            result.errors["image"] = error

    if result.errors:
        result.school = None
    return result


def validation_rules() -> Dict[str, Any]:
    schema = SchoolCreate.model_json_schema()
    required = set(schema.get("required", []))

    rules: Dict[str, Any] = {}
    for field_name in TEXT_FIELDS:
        prop = schema["properties"][field_name]
        rule: Dict[str, Any] = {"required": field_name in required}
        ref = prop.get("$ref") or prop.get("allOf", [{}])[0].get("$ref")
        if ref:
            rule["choices"] = schema["$defs"][ref.rsplit("/", 1)[-1]]["enum"]
        for key in ("minLength", "maxLength", "pattern"):
            if key in prop:
                rule[key] = prop[key]
        rules[field_name] = rule

    rules["image"] = {
        "required": False,
        "maxSizeBytes": MAX_IMAGE_SIZE_BYTES,
        "allowedTypes": list(ALLOWED_IMAGE_TYPES),
    }
    return rules
