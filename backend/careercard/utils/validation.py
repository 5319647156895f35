"""
Input validation schemas using Pydantic
"""
import ipaddress
import re
import socket
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from careercard.config import (
    DESCRIPTION_MAX_LENGTH,
    MAX_FILE_SIZE_MB,
    RESUME_TEXT_MAX_LENGTH,
    URL_MAX_LENGTH,
)
from careercard.models.career_card import CareerCard
from careercard.utils.exceptions import ValidationError

DATA_URL_RE = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[\w-]+=[\w.-]+)*;base64,(?P<data>.*)$', re.DOTALL)


def validate_text_length(text, max_length: int, field_name: str) -> str:
    """
    Reject missing, blank or oversized text.

    Raises:
        ValidationError: "<field_name> is required" or
            "<field_name> exceeds maximum length of N characters"
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(f"{field_name} is required")
    if len(text) > max_length:
        raise ValidationError(f"{field_name} exceeds maximum length of {max_length} characters")
    return text


def validate_url(url: str, allowed_domains: Optional[List[str]] = None) -> str:
    """
    Check that ``url`` is an absolute http(s) URL, optionally restricted to a
    set of domains (the domain itself or any of its subdomains).
    """
    if not isinstance(url, str) or len(url) > URL_MAX_LENGTH:
        raise ValidationError('Invalid URL format' if not isinstance(url, str) else 'URL too long')

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError:
        raise ValidationError('Invalid URL format')

    if parsed.scheme not in ('http', 'https') or not hostname:
        raise ValidationError('Invalid URL format')

    if allowed_domains:
        is_allowed = any(
            hostname == domain or hostname.endswith(f'.{domain}')
            for domain in allowed_domains
        )
        if not is_allowed:
            raise ValidationError(f"URL domain must be one of: {', '.join(allowed_domains)}")

    return url.strip()


PUBLIC_HOST_MESSAGE = "URL must point to a public website"


def _is_public_ip(value: str) -> bool:
    try:
        address = ipaddress.ip_address(value.split("%", 1)[0])
    except ValueError:
        return False
    if getattr(address, "ipv4_mapped", None):
        address = address.ipv4_mapped
    return address.is_global and not address.is_multicast


def ensure_public_url(url: str, resolve: bool = True) -> str:
    """
    Reject URLs whose host is loopback, private, link-local or otherwise not
    publicly routable.

    Without ``resolve`` only IP literals and localhost are checked, so request
    validation never touches DNS. With ``resolve`` every address the host
    resolves to must be public.
    """
    url = validate_url(url)
    hostname = urlparse(url).hostname.rstrip(".").lower()

    if hostname == "localhost" or hostname.endswith(".localhost"):
        raise ValidationError(PUBLIC_HOST_MESSAGE)

    try:
        ipaddress.ip_address(hostname.split("%", 1)[0])
        is_literal = True
    except ValueError:
        is_literal = False

    if is_literal:
        addresses = {hostname}
    elif resolve:
        try:
            addresses = {info[4][0] for info in socket.getaddrinfo(hostname, None)}
        except (socket.gaierror, UnicodeError):
            raise ValidationError("Could not resolve URL host")
    else:
        return url

    if not addresses or not all(_is_public_ip(a) for a in addresses):
        raise ValidationError(PUBLIC_HOST_MESSAGE)
    return url


def parse_data_url(data_url: str):
    """
    Split a base64 ``data:`` URL into (mime type, base64 payload).
    Returns None when the string is not a base64 data URL.
    """
    match = DATA_URL_RE.match(data_url or '')
    if not match:
        return None
    return (match.group('mime') or 'application/octet-stream').lower(), match.group('data')


def _optional_profile_url(value, domains, label):
    if value is None or not str(value).strip():
        return None
    try:
        return validate_url(value, domains)
    except ValidationError as e:
        raise ValueError(f"Invalid {label} URL: {e.message}") from e


class ParseResumeRequest(BaseModel):
    """Validation schema for full resume / profile import"""
    fileData: Optional[str] = Field(None, description="Resume file as a base64 data URL")
    fileName: Optional[str] = Field(None, max_length=255)
    linkedinUrl: Optional[str] = Field(None, description="LinkedIn profile URL")
    githubUrl: Optional[str] = Field(None, description="GitHub profile URL")

    @field_validator('linkedinUrl')
    @classmethod
    def validate_linkedin_url(cls, v):
        return _optional_profile_url(v, ['linkedin.com'], 'LinkedIn')

    @field_validator('githubUrl')
    @classmethod
    def validate_github_url(cls, v):
        return _optional_profile_url(v, ['github.com'], 'GitHub')

    @field_validator('fileData')
    @classmethod
    def validate_file_data(cls, v):
        if v is None or not v.strip():
            return None
        parsed = parse_data_url(v.strip())
        if not parsed:
            raise ValueError('File data must be a base64 data URL')
        # base64 inflates by 4/3
        approx_bytes = len(parsed[1]) * 3 // 4
        if approx_bytes > MAX_FILE_SIZE_MB * 1024 * 1024:
            raise ValueError(f'File size must be less than {MAX_FILE_SIZE_MB}MB')
        return v.strip()

    @model_validator(mode='after')
    def require_a_source(self):
        if not (self.fileData or self.linkedinUrl or self.githubUrl):
            raise ValueError('Provide a resume file or at least a LinkedIn or GitHub URL')
        return self


class ParseResumeExperienceRequest(BaseModel):
    """Validation schema for plain-text experience extraction"""
    resumeText: Optional[str] = Field(None, validate_default=True)

    @field_validator('resumeText')
    @classmethod
    def validate_resume_text(cls, v):
        return validate_text_length(v, RESUME_TEXT_MAX_LENGTH, 'Resume text')


class ParsePortfolioRequest(BaseModel):
    """Validation schema for portfolio site import"""
    portfolioUrl: Optional[str] = Field(None, validate_default=True)

    @field_validator('portfolioUrl')
    @classmethod
    def validate_portfolio_url(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValidationError('Portfolio URL is required')
        return ensure_public_url(v, resolve=False)


class ScoreCareerCardRequest(BaseModel):
    """Validation schema for scoring a card against a company and role"""
    careerCardData: CareerCard
    companyDescription: Optional[str] = Field(None, validate_default=True)
    roleDescription: Optional[str] = Field(None, validate_default=True)

    @field_validator('companyDescription')
    @classmethod
    def validate_company(cls, v):
        return validate_text_length(v, DESCRIPTION_MAX_LENGTH, 'Company description').strip()

    @field_validator('roleDescription')
    @classmethod
    def validate_role(cls, v):
        return validate_text_length(v, DESCRIPTION_MAX_LENGTH, 'Role description').strip()


class CareerCardWriteRequest(BaseModel):
    """Validation schema for creating or updating a stored card"""
    cardData: CareerCard


def validate_request(schema_class: type[BaseModel], data: dict) -> dict:
    """
    Validate request data against a Pydantic schema.

    Args:
        schema_class: Pydantic model class
        data: Request data to validate

    Returns:
        Validated data dict (unset optional fields omitted)

    Raises:
        ValidationError: body is not a JSON object or fails the schema
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    try:
        validated = schema_class(**data)
    except ValidationError:
        raise
    except PydanticValidationError as e:
        # Convert Pydantic validation errors to our ValidationError
        errors = []
        for error in e.errors():
            field = '.'.join(str(x) for x in error.get('loc', []))
            message = error.get('msg', 'Validation error')
            errors.append(f"{field}: {message}" if field else message)
        raise ValidationError('; '.join(errors) or str(e), details={'validation_errors': errors})

    return validated.model_dump(mode='json', exclude_none=True)
