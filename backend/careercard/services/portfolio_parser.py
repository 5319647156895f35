"""
Portfolio parser service - fetch a personal site and extract projects,
frameworks and profile details from it
"""
import logging
import re
from typing import Dict
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from careercard.config import (
    PORTFOLIO_FETCH_TIMEOUT,
    PORTFOLIO_MAX_BYTES,
    PORTFOLIO_MAX_REDIRECTS,
    PORTFOLIO_TEXT_LIMIT,
)
from careercard.models.enums import Proficiency
from careercard.services.llm_client import call_tool, function_tool
from careercard.services.response_parser import (
    LLMResponseError,
    extract_payload,
    shape_items,
    shape_object,
)
from careercard.utils.exceptions import ExternalAPIError
from careercard.utils.validation import ensure_public_url

logger = logging.getLogger(__name__)

SERVICE_NAME = "portfolio_site"
USER_AGENT = "Mozilla/5.0 (compatible; PortfolioParser/1.0)"

PROFILE_FIELDS = ("name", "title", "bio")
PROJECT_FIELDS = ("name", "description", "technologies")
FRAMEWORK_FIELDS = ("name", "proficiency")

_WHITESPACE_RE = re.compile(r'\s+')

PORTFOLIO_TOOL = function_tool(
    "extract_portfolio_data",
    "Extract structured portfolio data including projects and profile information",
    {
        "type": "object",
        "properties": {
            "profile": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Person's name if found"},
                    "title": {"type": "string", "description": "Professional title if found"},
                    "bio": {"type": "string", "description": "Short bio or description"},
                },
            },
            "projects": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Project name"},
                        "description": {"type": "string", "description": "Project description"},
                        "technologies": {"type": "string", "description": "Technologies used (comma-separated)"},
                    },
                    "required": ["name", "description"],
                },
            },
            "frameworks": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Framework or technology name"},
                        "proficiency": {
                            "type": "string",
                            "enum": [level.value for level in Proficiency],
                            "description": "Proficiency level",
                        },
                    },
                    "required": ["name"],
                },
            },
        },
        "required": ["projects"],
    },
)


def _read_capped(response, max_bytes: int = PORTFOLIO_MAX_BYTES) -> str:
    """Read at most ``max_bytes`` of a streamed body and decode it."""
    chunks = []
    size = 0
    for chunk in response.iter_content(chunk_size=64 * 1024):
        if not chunk:
            continue
        chunks.append(chunk)
        size += len(chunk)
        if size >= max_bytes:
            logger.info(f"Portfolio body truncated at {max_bytes} bytes")
            break

    body = b"".join(chunks)[:max_bytes]
    try:
        return body.decode(response.encoding or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_portfolio_html(url: str) -> str:
    """
    Download the portfolio page.

    Redirects are followed by hand so every hop is checked with
    ``ensure_public_url``; a host that resolves to an internal address is a
    ValidationError. Only the first PORTFOLIO_MAX_BYTES of the body are read.
    Network failures and non-2xx answers are downstream errors.
    """
    current = url
    for _ in range(PORTFOLIO_MAX_REDIRECTS + 1):
        ensure_public_url(current)
        try:
            response = requests.get(
                current,
                headers={
                    "User-Agent": USER_AGENT,
                    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
                },
                timeout=PORTFOLIO_FETCH_TIMEOUT,
                stream=True,
                allow_redirects=False,
            )
            try:
                if response.is_redirect:
                    current = urljoin(current, response.headers.get("Location", ""))
                    continue
                response.raise_for_status()
                html = _read_capped(response)
            finally:
                response.close()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch portfolio {current}: {e}")
            raise ExternalAPIError(SERVICE_NAME, details={'url': url})

        logger.info(f"Fetched portfolio HTML, length: {len(html)}")
        return html

    logger.error(f"Too many redirects fetching portfolio {url}")
    raise ExternalAPIError(SERVICE_NAME, details={'url': url, 'reason': 'too_many_redirects'})


def html_to_text(html: str, limit: int = PORTFOLIO_TEXT_LIMIT) -> str:
    """Visible text of an HTML page, whitespace collapsed and truncated to ``limit``."""
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()
    text = _WHITESPACE_RE.sub(" ", soup.get_text(separator=" ")).strip()
    return text[:limit]


def empty_portfolio_data() -> Dict:
    return {
        "profile": shape_object({}, PROFILE_FIELDS),
        "projects": [],
        "frameworks": [],
    }


def reshape_portfolio_data(payload) -> Dict:
    if not isinstance(payload, dict):
        return empty_portfolio_data()

    frameworks = shape_items(payload.get("frameworks"), FRAMEWORK_FIELDS)
    for framework in frameworks:
        framework["proficiency"] = Proficiency.normalize(framework["proficiency"])

    return {
        "profile": shape_object(payload.get("profile"), PROFILE_FIELDS),
        "projects": shape_items(payload.get("projects"), PROJECT_FIELDS),
        "frameworks": frameworks,
    }


def parse_portfolio(portfolio_url: str) -> Dict:
    """Fetch ``portfolio_url`` and extract card sections from its text."""
    text_content = html_to_text(fetch_portfolio_html(portfolio_url))
    logger.info(f"Extracted text content, length: {len(text_content)}")

    completion = call_tool(
        None,
        "Analyze this portfolio website content and extract structured information about "
        "projects, skills, and experience.\n\n"
        f"Website URL: {portfolio_url}\n\nContent:\n{text_content}",
        PORTFOLIO_TOOL,
    )

    try:
        payload = extract_payload(completion)
    except LLMResponseError as e:
        logger.warning(f"Falling back to empty portfolio data: {e}")
        return empty_portfolio_data()

    return reshape_portfolio_data(payload)
