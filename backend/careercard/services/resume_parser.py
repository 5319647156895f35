"""
Resume parser service - turn a resume (file and/or profile links) or pasted
resume text into career card sections
"""
import base64
import binascii
import logging
from io import BytesIO
from typing import Dict, List, Optional

import PyPDF2
from docx import Document

from careercard.services.llm_client import call_tool, function_tool
from careercard.services.response_parser import (
    LLMResponseError,
    extract_payload,
    shape_items,
    shape_object,
)
from careercard.utils.exceptions import ValidationError
from careercard.utils.validation import parse_data_url

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PROFILE_FIELDS = ("name", "title", "location")
EXPERIENCE_FIELDS = ("title", "company", "period", "description")
CERTIFICATION_FIELDS = ("name", "issuer", "date", "url")

_EXPERIENCE_ITEM = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "Job title / position"},
        "company": {"type": "string", "description": "Company name"},
        "period": {"type": "string", "description": "Time period, e.g. 'Jan 2020 - Dec 2022'"},
        "description": {"type": "string", "description": "Responsibilities and achievements"},
    },
    "required": ["title", "company"],
}

CAREER_DATA_TOOL = function_tool(
    "extract_career_data",
    "Extract structured career data (profile, work experience, certifications)",
    {
        "type": "object",
        "properties": {
            "profile": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Full name"},
                    "title": {"type": "string", "description": "Professional title"},
                    "location": {"type": "string", "description": "City, Country"},
                },
            },
            "experience": {"type": "array", "items": _EXPERIENCE_ITEM},
            "certifications": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Certification name"},
                        "issuer": {"type": "string", "description": "Issuing organization"},
                        "date": {"type": "string", "description": "Date obtained"},
                        "url": {"type": "string", "description": "Credential URL, if available"},
                    },
                    "required": ["name"],
                },
            },
        },
        "required": ["profile", "experience", "certifications"],
    },
)

EXPERIENCE_TOOL = function_tool(
    "extract_experience",
    "Extract the work experience entries found in a resume",
    {
        "type": "object",
        "properties": {
            "experiences": {"type": "array", "items": _EXPERIENCE_ITEM},
        },
        "required": ["experiences"],
    },
)

CAREER_DATA_PROMPT = """You are a career data extraction expert. Extract and structure career information from resumes and professional profiles.

Rules:
- Only use information present in the provided material; never invent employers, dates or credentials.
- Use empty strings for anything that is not found.
- For certifications, always include the URL/link to the credential if it is available in the source data.
- Answer by calling the extract_career_data function."""

EXPERIENCE_PROMPT = """You are a resume parser. Extract work experience entries from the resume text.

Each entry has:
- title: job title/position
- company: company name
- period: time period (e.g., "Jan 2020 - Dec 2022" or "2020-2022")
- description: job responsibilities and achievements

If no experience is found, return an empty list. Answer by calling the extract_experience function."""


def empty_career_data() -> Dict:
    return {
        "profile": shape_object({}, PROFILE_FIELDS),
        "experience": [],
        "certifications": [],
    }


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """Extract text from PDF bytes using PyPDF2."""
    try:
        pdf_reader = PyPDF2.PdfReader(BytesIO(pdf_bytes))
        text = ""
        for page in pdf_reader.pages:
            page_text = page.extract_text()
            if page_text:
                cleaned_text = ''.join(char for char in page_text if char.isprintable() or char.isspace())
                text += cleaned_text + "\n"
        return ' '.join(text.split())
    except Exception as e:
        logger.warning(f"PDF text extraction failed: {e}")
        return ""


def extract_text_from_docx_bytes(docx_bytes: bytes) -> str:
    """Extract paragraph and table text from DOCX bytes using python-docx."""
    try:
        doc = Document(BytesIO(docx_bytes))
        text_parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    text_parts.extend(p.text for p in cell.paragraphs if p.text.strip())
        return '\n'.join(text_parts).strip()
    except Exception as e:
        logger.warning(f"DOCX text extraction failed: {e}")
        return ""


def _decode_file(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise ValidationError("File data is not valid base64", field="fileData")


def _document_kind(mime: str, file_name: Optional[str]) -> Optional[str]:
    """'pdf', 'docx', 'image' or None for anything the model cannot read."""
    name = (file_name or "").lower()
    if mime == PDF_MIME or name.endswith(".pdf"):
        return "pdf"
    if mime == DOCX_MIME or name.endswith(".docx"):
        return "docx"
    if mime.startswith("image/"):
        return "image"
    return None


def build_resume_content(file_data: Optional[str] = None, file_name: Optional[str] = None,
                         linkedin_url: Optional[str] = None, github_url: Optional[str] = None) -> List[Dict]:
    """
    Build the multimodal user message for a resume import.

    PDF and DOCX files are converted to text here; images are forwarded to the
    model as-is. Any other file type (including legacy .doc) is rejected.
    """
    text_prompt = "Parse the following career information and extract structured data:\n\n"
    if linkedin_url:
        text_prompt += f"LinkedIn URL: {linkedin_url}\n"
    if github_url:
        text_prompt += f"GitHub URL: {github_url}\n"

    content = [{"type": "text", "text": text_prompt}]
    if not file_data:
        return content

    parsed = parse_data_url(file_data)
    if not parsed:
        raise ValidationError("File data must be a base64 data URL", field="fileData")
    mime, payload = parsed

    kind = _document_kind(mime, file_name)
    if kind is None:
        raise ValidationError("Unsupported file type. Upload a PDF, DOCX or image file", field="fileData")

    if kind == "image":
        content.append({"type": "image_url", "image_url": {"url": file_data}})
        return content

    file_bytes = _decode_file(payload)
    if kind == "pdf":
        resume_text = extract_text_from_pdf_bytes(file_bytes)
    else:
        resume_text = extract_text_from_docx_bytes(file_bytes)
    if not resume_text:
        raise ValidationError(f"Could not extract text from {kind.upper()}", field="fileData")

    logger.info(f"Extracted {len(resume_text)} characters from {file_name or kind.upper()}")
    content.append({"type": "text", "text": f"Resume ({file_name or 'resume.' + kind}):\n{resume_text}"})
    return content


def reshape_career_data(payload) -> Dict:
    """Declared fields only, with ids on experience and certification entries."""
    if not isinstance(payload, dict):
        return empty_career_data()
    return {
        "profile": shape_object(payload.get("profile"), PROFILE_FIELDS),
        "experience": shape_items(payload.get("experience"), EXPERIENCE_FIELDS),
        "certifications": shape_items(payload.get("certifications"), CERTIFICATION_FIELDS),
    }


def parse_resume(file_data: Optional[str] = None, file_name: Optional[str] = None,
                 linkedin_url: Optional[str] = None, github_url: Optional[str] = None) -> Dict:
    """
    Extract profile, experience and certifications from a resume file and/or
    profile URLs. An unusable model reply yields the empty structure.
    """
    content = build_resume_content(file_data, file_name, linkedin_url, github_url)
    completion = call_tool(CAREER_DATA_PROMPT, content, CAREER_DATA_TOOL)

    try:
        payload = extract_payload(completion)
    except LLMResponseError as e:
        logger.warning(f"Falling back to empty career data: {e}")
        return empty_career_data()

    return reshape_career_data(payload)


def parse_resume_experience(resume_text: str) -> List[Dict]:
    """
    Extract work experience entries from plain resume text.
    Never raises on a bad model reply; returns [] instead.
    """
    completion = call_tool(
        EXPERIENCE_PROMPT,
        f"Parse this resume text and extract work experience:\n\n{resume_text}",
        EXPERIENCE_TOOL,
    )

    try:
        payload = extract_payload(completion)
    except LLMResponseError as e:
        logger.warning(f"Falling back to no experiences: {e}")
        return []

    # Some models answer with the bare array
    if isinstance(payload, dict):
        payload = payload.get("experiences", [])
    experiences = shape_items(payload, EXPERIENCE_FIELDS)
    logger.info(f"Parsed {len(experiences)} experience entries")
    return experiences
