"""
Models package - career card document schema and record helpers
"""
from careercard.models.career_card import (
    CareerCard,
    create_card_record,
    format_card_response,
    is_card_id,
)
from careercard.models.enums import Proficiency, ScoreCategory

__all__ = [
    # Card models
    'CareerCard',
    'create_card_record',
    'format_card_response',
    'is_card_id',
    # Enums
    'Proficiency',
    'ScoreCategory',
]
