"""
Resume parsing routes
"""
import logging

from flask import Blueprint, jsonify, request

from careercard.extensions import llm_rate_limit, require_firebase_auth
from careercard.services.resume_parser import parse_resume, parse_resume_experience
from careercard.utils.validation import (
    ParseResumeExperienceRequest,
    ParseResumeRequest,
    validate_request,
)

resume_bp = Blueprint('resume', __name__, url_prefix='/api')

logger = logging.getLogger(__name__)


@resume_bp.route('/parse-resume', methods=['POST'])
@require_firebase_auth
@llm_rate_limit
def parse_resume_route():
    """
    Auto-fill a career card from a resume file and/or profile links.

    Request body:
    {
        "fileData": "data:application/pdf;base64,...",   // optional
        "fileName": "resume.pdf",                          // optional
        "linkedinUrl": "https://www.linkedin.com/in/...",  // optional
        "githubUrl": "https://github.com/..."              // optional
    }

    Response:
    {
        "profile": {"name": "...", "title": "...", "location": "..."},
        "experience": [{"id", "title", "company", "period", "description"}],
        "certifications": [{"id", "name", "issuer", "date", "url"}]
    }
    """
    data = validate_request(ParseResumeRequest, request.get_json(silent=True))
    logger.info("Processing resume parse request", extra={
        'file_name': data.get('fileName'),
        'has_file': 'fileData' in data,
        'has_linkedin': 'linkedinUrl' in data,
        'has_github': 'githubUrl' in data,
    })

    result = parse_resume(
        file_data=data.get('fileData'),
        file_name=data.get('fileName'),
        linkedin_url=data.get('linkedinUrl'),
        github_url=data.get('githubUrl'),
    )
    return jsonify(result), 200


@resume_bp.route('/parse-resume-experience', methods=['POST'])
@require_firebase_auth
@llm_rate_limit
def parse_resume_experience_route():
    """
    Extract work experience entries from pasted resume text.

    Request body: {"resumeText": "..."}
    Response: {"experiences": [{"id", "title", "company", "period", "description"}]}
    """
    data = validate_request(ParseResumeExperienceRequest, request.get_json(silent=True))
    logger.info(f"Parsing resume text, length: {len(data['resumeText'])}")

    experiences = parse_resume_experience(data['resumeText'])
    return jsonify({'experiences': experiences}), 200
