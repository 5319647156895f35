"""
LLM client service - one schema-constrained chat completion per request
"""
import logging
from typing import Dict, List, Optional, Union

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    OpenAI,
    OpenAIError,
)

from careercard.config import LLM_API_KEY, LLM_BASE_URL, LLM_MODEL, LLM_TIMEOUT_SECONDS
from careercard.utils.exceptions import (
    ConfigurationError,
    ExternalAPIError,
    PaymentRequiredError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "llm_gateway"

_httpx_timeout = httpx.Timeout(
    connect=30.0,
    read=LLM_TIMEOUT_SECONDS,
    write=30.0,
    pool=30.0,
)

_httpx_limits = httpx.Limits(
    max_keepalive_connections=20,
    max_connections=100,
    keepalive_expiry=30.0,
)

# Every failure is terminal for the request, so the SDK must not retry
client = OpenAI(
    api_key=LLM_API_KEY,
    base_url=LLM_BASE_URL,
    timeout=LLM_TIMEOUT_SECONDS,
    max_retries=0,
    http_client=httpx.Client(
        timeout=_httpx_timeout,
        limits=_httpx_limits,
    ),
) if LLM_API_KEY else None


def get_llm_client():
    """Get the LLM client (None when no API key is configured)"""
    return client


def function_tool(name: str, description: str, parameters: Dict) -> Dict:
    """Wrap a JSON schema as a tool definition."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


def _messages(system_prompt: Optional[str], user_content: Union[str, List[Dict]]) -> List[Dict]:
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_content})
    return messages


def _complete(**kwargs):
    llm = get_llm_client()
    if llm is None:
        logger.error("LLM_API_KEY is not configured")
        raise ConfigurationError()

    try:
        return llm.chat.completions.create(model=LLM_MODEL, **kwargs)
    except APIStatusError as e:
        body = getattr(e.response, 'text', '') if e.response is not None else ''
        logger.error(f"AI gateway error: {e.status_code} {body[:500]}")
        if e.status_code == 429:
            raise RateLimitError()
        if e.status_code == 402:
            raise PaymentRequiredError()
        raise ExternalAPIError(SERVICE_NAME, details={'status': e.status_code})
    except (APITimeoutError, APIConnectionError) as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise ExternalAPIError(SERVICE_NAME)
    except OpenAIError as e:
        logger.error(f"AI gateway call failed: {e}")
        raise ExternalAPIError(SERVICE_NAME)


def call_tool(system_prompt: Optional[str], user_content: Union[str, List[Dict]], tool: Dict):
    """
    Run one completion forced to answer through ``tool``.

    Returns the raw completion; use ``response_parser.extract_payload`` to get
    the arguments out of it.
    """
    tool_name = tool["function"]["name"]
    logger.info(f"Calling AI gateway with tool {tool_name}", extra={'model': LLM_MODEL})
    return _complete(
        messages=_messages(system_prompt, user_content),
        tools=[tool],
        tool_choice={"type": "function", "function": {"name": tool_name}},
        temperature=0.1,
    )
