"""
Portfolio import routes
"""
from flask import Blueprint, jsonify, request

from careercard.extensions import llm_rate_limit, require_firebase_auth
from careercard.services.portfolio_parser import parse_portfolio
from careercard.utils.validation import ParsePortfolioRequest, validate_request

portfolio_bp = Blueprint('portfolio', __name__, url_prefix='/api')


@portfolio_bp.route('/parse-portfolio', methods=['POST'])
@require_firebase_auth
@llm_rate_limit
def parse_portfolio_route():
    """
    Import projects and frameworks from a portfolio website.

    Request body: {"portfolioUrl": "https://janedoe.dev"}
    Response: {"success": true, "data": {"profile", "projects", "frameworks"}, "sourceUrl": "..."}
    """
    data = validate_request(ParsePortfolioRequest, request.get_json(silent=True))
    portfolio_url = data['portfolioUrl']

    return jsonify({
        'success': True,
        'data': parse_portfolio(portfolio_url),
        'sourceUrl': portfolio_url,
    }), 200
