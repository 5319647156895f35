"""
Routes package - all API route blueprints
"""
from careercard.routes.health import health_bp
from careercard.routes.parse_resume import resume_bp
from careercard.routes.portfolio import portfolio_bp
from careercard.routes.scoring import scoring_bp
from careercard.routes.career_cards import career_cards_bp

__all__ = [
    'health_bp',
    'resume_bp',
    'portfolio_bp',
    'scoring_bp',
    'career_cards_bp',
]
