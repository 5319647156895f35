"""
Career card scoring routes
"""
from flask import Blueprint, jsonify, request

from careercard.extensions import llm_rate_limit, require_firebase_auth
from careercard.services.card_scorer import score_career_card
from careercard.utils.validation import ScoreCareerCardRequest, validate_request

scoring_bp = Blueprint('scoring', __name__, url_prefix='/api')


@scoring_bp.route('/score-career-card', methods=['POST'])
@require_firebase_auth
@llm_rate_limit
def score_career_card_route():
    """
    Score a career card against a company and a role.

    Request body:
    {
        "careerCardData": {...},
        "companyDescription": "...",
        "roleDescription": "..."
    }

    Response:
    {
        "overallScore": 78,
        "categoryScores": {"technicalSkills": {"score", "feedback"}, ...},
        "strengths": [...],
        "improvements": [...],
        "overallFeedback": "..."
    }
    """
    data = validate_request(ScoreCareerCardRequest, request.get_json(silent=True))

    result = score_career_card(
        data['careerCardData'],
        data['companyDescription'],
        data['roleDescription'],
    )
    return jsonify(result), 200
