"""
Career card document models and record helpers
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careercard.models.enums import Proficiency

SHORT = 100
MEDIUM = 500
LONG = 2000
CODE = 50000
URL = 500


def _check_url(value: Optional[str]) -> Optional[str]:
    """Empty string is allowed; anything else must be an absolute http(s) URL."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return ""
    # Imported lazily: validation imports this module for the request schemas
    from careercard.utils.exceptions import ValidationError
    from careercard.utils.validation import validate_url
    try:
        validate_url(value)
    except ValidationError as e:
        raise ValueError(e.message) from e
    return value


class CardSection(BaseModel):
    """Common config for every card section: unknown keys are dropped."""
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


class Profile(CardSection):
    name: str = Field("", max_length=SHORT)
    title: str = Field("", max_length=SHORT)
    location: Optional[str] = Field("", max_length=SHORT)
    imageUrl: Optional[str] = Field("", max_length=URL)
    portfolioUrl: Optional[str] = Field("", max_length=URL)
    bio: Optional[str] = Field("", max_length=LONG)

    @field_validator('imageUrl', 'portfolioUrl')
    @classmethod
    def check_urls(cls, v):
        return _check_url(v)


class Experience(CardSection):
    id: Optional[str] = None
    title: str = Field(..., max_length=SHORT)
    company: str = Field(..., max_length=SHORT)
    period: str = Field(..., max_length=SHORT)
    description: str = Field(..., max_length=LONG)


class Project(CardSection):
    id: Optional[str] = None
    name: str = Field(..., max_length=SHORT)
    description: str = Field(..., max_length=LONG)
    technologies: str = Field("", max_length=MEDIUM)
    url: Optional[str] = Field("", max_length=URL)
    imageUrl: Optional[str] = Field("", max_length=URL)

    @field_validator('url', 'imageUrl')
    @classmethod
    def check_urls(cls, v):
        return _check_url(v)


class Certification(CardSection):
    id: Optional[str] = None
    name: str = Field(..., max_length=SHORT)
    issuer: str = Field("", max_length=SHORT)
    date: str = Field("", max_length=SHORT)
    url: Optional[str] = Field("", max_length=URL)

    @field_validator('url')
    @classmethod
    def check_url(cls, v):
        return _check_url(v)


class GreatestImpact(CardSection):
    id: Optional[str] = None
    title: str = Field(..., max_length=SHORT)
    context: str = Field(..., max_length=LONG)
    outcome: Optional[str] = Field("", max_length=LONG)


class StyleOfWork(CardSection):
    id: Optional[str] = None
    question: str = Field(..., max_length=MEDIUM)
    selectedAnswer: str = Field(..., max_length=MEDIUM)


class Framework(CardSection):
    id: Optional[str] = None
    name: str = Field(..., max_length=SHORT)
    proficiency: Proficiency
    projectsBuilt: Optional[str] = Field("", max_length=SHORT)


class Pastime(CardSection):
    id: Optional[str] = None
    activity: str = Field(..., max_length=SHORT)
    description: str = Field(..., max_length=LONG)


class CodeSnippet(CardSection):
    id: Optional[str] = None
    fileName: str = Field(..., max_length=SHORT)
    language: str = Field(..., max_length=SHORT)
    repo: Optional[str] = Field("", max_length=SHORT)
    url: Optional[str] = Field("", max_length=URL)
    caption: Optional[str] = Field("", max_length=MEDIUM)
    code: str = Field(..., max_length=CODE)

    @field_validator('url')
    @classmethod
    def check_url(cls, v):
        return _check_url(v)


class CareerCard(CardSection):
    """The user-authored career card document."""
    profile: Profile = Field(default_factory=Profile)
    experience: List[Experience] = Field(default_factory=list, max_length=20)
    projects: List[Project] = Field(default_factory=list, max_length=20)
    certifications: List[Certification] = Field(default_factory=list, max_length=20)
    greatestImpacts: List[GreatestImpact] = Field(default_factory=list, max_length=10)
    stylesOfWork: List[StyleOfWork] = Field(default_factory=list, max_length=20)
    frameworks: List[Framework] = Field(default_factory=list, max_length=30)
    pastimes: List[Pastime] = Field(default_factory=list, max_length=10)
    codeShowcase: List[CodeSnippet] = Field(default_factory=list, max_length=10)
    theme: Optional[str] = Field(None, max_length=50)


def create_card_record(owner_id: str, card_data: dict) -> dict:
    """Build a new Firestore record for a validated card."""
    now = datetime.now(timezone.utc).isoformat()
    return {
        'id': str(uuid.uuid4()),
        'user_id': owner_id,
        'card_data': card_data,
        'created_at': now,
        'updated_at': now,
    }


def is_card_id(value: str) -> bool:
    """Record ids are UUIDs; anything else cannot exist."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def format_card_response(record: dict) -> dict:
    """Shape a stored record for the API."""
    return {
        'id': record.get('id'),
        'cardData': record.get('card_data') or {},
        'updatedAt': record.get('updated_at'),
    }
