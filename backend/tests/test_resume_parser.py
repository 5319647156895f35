"""
Tests for the resume parser service
"""
import base64
from io import BytesIO
from unittest.mock import patch

import pytest
from docx import Document

from careercard.services.resume_parser import (
    CAREER_DATA_TOOL,
    EXPERIENCE_TOOL,
    build_resume_content,
    empty_career_data,
    extract_text_from_docx_bytes,
    extract_text_from_pdf_bytes,
    parse_resume,
    parse_resume_experience,
)
from careercard.utils.exceptions import ValidationError

PDF_DATA_URL = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4 fake").decode()
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_bytes(*paragraphs):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _data_url(mime, raw):
    return f"data:{mime};base64," + base64.b64encode(raw).decode()


class TestBuildResumeContent:
    """Test the user message sent for a resume import"""

    def test_links_only(self):
        content = build_resume_content(linkedin_url="https://linkedin.com/in/jane")
        assert len(content) == 1
        assert "LinkedIn URL: https://linkedin.com/in/jane" in content[0]["text"]

    @patch('careercard.services.resume_parser.extract_text_from_pdf_bytes')
    def test_pdf_is_sent_as_text(self, mock_extract):
        mock_extract.return_value = "Jane Doe Backend Engineer"
        content = build_resume_content(PDF_DATA_URL, "cv.pdf")

        mock_extract.assert_called_once_with(b"%PDF-1.4 fake")
        assert content[1]["type"] == "text"
        assert "Jane Doe Backend Engineer" in content[1]["text"]

    @patch('careercard.services.resume_parser.extract_text_from_pdf_bytes', return_value="")
    def test_pdf_without_text(self, mock_extract):
        with pytest.raises(ValidationError) as exc_info:
            build_resume_content(PDF_DATA_URL, "cv.pdf")
        assert "Could not extract text from PDF" in exc_info.value.message

    def test_image_is_forwarded(self):
        content = build_resume_content(PNG_DATA_URL, "cv.png")
        assert content[1] == {"type": "image_url", "image_url": {"url": PNG_DATA_URL}}

    def test_unreadable_pdf_bytes(self):
        assert extract_text_from_pdf_bytes(b"not a pdf") == ""

    def test_docx_is_sent_as_text(self):
        data_url = _data_url(DOCX_MIME, _docx_bytes("Jane Doe", "Engineer at Acme, 2020 - 2023"))
        content = build_resume_content(data_url, "cv.docx")

        assert content[1]["type"] == "text"
        assert "Engineer at Acme, 2020 - 2023" in content[1]["text"]
        assert "cv.docx" in content[1]["text"]

    def test_docx_detected_by_file_name(self):
        data_url = _data_url("application/octet-stream", _docx_bytes("Jane Doe"))
        content = build_resume_content(data_url, "Resume.DOCX")
        assert content[1]["type"] == "text"
        assert "Jane Doe" in content[1]["text"]

    def test_docx_without_text(self):
        with pytest.raises(ValidationError) as exc_info:
            build_resume_content(_data_url(DOCX_MIME, _docx_bytes()), "cv.docx")
        assert "Could not extract text from DOCX" in exc_info.value.message

    def test_unreadable_docx_bytes(self):
        assert extract_text_from_docx_bytes(b"not a zip") == ""

    def test_legacy_doc_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_resume_content(_data_url("application/msword", b"\xd0\xcf\x11\xe0"), "cv.doc")
        assert "Unsupported file type" in exc_info.value.message

    def test_other_types_rejected(self):
        with pytest.raises(ValidationError):
            build_resume_content(_data_url("text/plain", b"Jane Doe"), "cv.txt")



class TestParseResume:
    """Test resume import reshaping"""

    @patch('careercard.services.resume_parser.call_tool')
    def test_reply_is_reshaped(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(arguments={
            "profile": {"name": "Jane Doe", "title": "Engineer", "location": "Berlin", "email": "j@x.io"},
            "experience": [{"title": "Engineer", "company": "Acme", "period": "2020-2023",
                            "description": "APIs", "salary": "secret"}],
            "certifications": [{"name": "AWS SAA", "issuer": "Amazon", "date": "2022",
                                "url": "https://aws.amazon.com/verify/123"}],
        })

        result = parse_resume(linkedin_url="https://linkedin.com/in/jane")

        assert result["profile"] == {"name": "Jane Doe", "title": "Engineer", "location": "Berlin"}
        experience = result["experience"][0]
        assert set(experience) == {"id", "title", "company", "period", "description"}
        assert result["certifications"][0]["url"] == "https://aws.amazon.com/verify/123"
        assert mock_call_tool.call_args[0][2] is CAREER_DATA_TOOL

    @patch('careercard.services.resume_parser.call_tool')
    def test_malformed_reply_falls_back(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(content="I could not read that resume.")
        assert parse_resume(github_url="https://github.com/jane") == empty_career_data()

    @patch('careercard.services.resume_parser.call_tool')
    def test_partial_reply(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(arguments={"profile": {"name": "Jane"}})
        result = parse_resume(github_url="https://github.com/jane")
        assert result["profile"]["title"] == ""
        assert result["experience"] == []
        assert result["certifications"] == []


class TestParseResumeExperience:
    """Test experience extraction from pasted text"""

    @patch('careercard.services.resume_parser.call_tool')
    def test_experiences_get_ids(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(arguments={"experiences": [
            {"title": "Engineer", "company": "Acme", "period": "2020-2023", "description": "APIs"},
            {"title": "Intern", "company": "Beta", "period": "2019", "description": "Tests"},
        ]})

        experiences = parse_resume_experience("Engineer at Acme...")

        assert len(experiences) == 2
        assert all(e["id"] for e in experiences)
        assert mock_call_tool.call_args[0][2] is EXPERIENCE_TOOL
        assert "Engineer at Acme..." in mock_call_tool.call_args[0][1]

    @patch('careercard.services.resume_parser.call_tool')
    def test_bare_array_reply(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(
            content='```json\n[{"title": "Engineer", "company": "Acme"}]\n```'
        )
        experiences = parse_resume_experience("resume")
        assert experiences[0]["company"] == "Acme"
        assert experiences[0]["period"] == ""

    @patch('careercard.services.resume_parser.call_tool')
    def test_malformed_reply_is_empty(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(arguments="not json")
        assert parse_resume_experience("resume") == []

    @patch('careercard.services.resume_parser.call_tool')
    def test_no_experience_found(self, mock_call_tool, make_completion):
        mock_call_tool.return_value = make_completion(arguments={"experiences": []})
        assert parse_resume_experience("hobbies only") == []
