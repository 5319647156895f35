"""
Tests for the LLM client wrapper
"""
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from careercard.services.llm_client import call_tool, function_tool
from careercard.utils.exceptions import (
    ConfigurationError,
    ExternalAPIError,
    PaymentRequiredError,
    RateLimitError,
)

TOOL = function_tool("extract_experience", "Extract experience", {"type": "object", "properties": {}})
GATEWAY_REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


def _status_error(status_code):
    response = httpx.Response(status_code, request=GATEWAY_REQUEST, text="gateway says no")
    return openai.APIStatusError("gateway error", response=response, body=None)


@pytest.fixture
def mock_llm():
    with patch('careercard.services.llm_client.get_llm_client') as mock_get:
        llm = MagicMock()
        mock_get.return_value = llm
        yield llm


class TestCallTool:
    """Test request shape and error mapping"""

    def test_forces_tool_choice(self, mock_llm):
        call_tool("system", "user text", TOOL)

        kwargs = mock_llm.chat.completions.create.call_args[1]
        assert kwargs["tools"] == [TOOL]
        assert kwargs["tool_choice"] == {"type": "function", "function": {"name": "extract_experience"}}
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user text"},
        ]
        assert kwargs["model"]

    def test_no_system_prompt(self, mock_llm):
        call_tool(None, "user text", TOOL)
        messages = mock_llm.chat.completions.create.call_args[1]["messages"]
        assert messages == [{"role": "user", "content": "user text"}]

    def test_gateway_rate_limit(self, mock_llm):
        mock_llm.chat.completions.create.side_effect = _status_error(429)
        with pytest.raises(RateLimitError):
            call_tool("system", "user", TOOL)

    def test_gateway_payment_required(self, mock_llm):
        mock_llm.chat.completions.create.side_effect = _status_error(402)
        with pytest.raises(PaymentRequiredError):
            call_tool("system", "user", TOOL)

    def test_gateway_server_error(self, mock_llm):
        mock_llm.chat.completions.create.side_effect = _status_error(503)
        with pytest.raises(ExternalAPIError) as exc_info:
            call_tool("system", "user", TOOL)
        assert exc_info.value.details == {"status": 503}

    def test_gateway_timeout(self, mock_llm):
        mock_llm.chat.completions.create.side_effect = openai.APITimeoutError(request=GATEWAY_REQUEST)
        with pytest.raises(ExternalAPIError):
            call_tool("system", "user", TOOL)

    def test_missing_api_key(self):
        with patch('careercard.services.llm_client.get_llm_client', return_value=None):
            with pytest.raises(ConfigurationError):
                call_tool("system", "user", TOOL)
