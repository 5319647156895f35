"""
Enums and constants for data models
"""
from enum import Enum


class Proficiency(str, Enum):
    """Framework proficiency levels shown on the card"""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

    @classmethod
    def normalize(cls, value, default=None):
        """Map free text from the LLM onto a level, case-insensitively."""
        default = default or cls.INTERMEDIATE
        if not isinstance(value, str):
            return default.value
        for level in cls:
            if value.strip().lower() == level.value.lower():
                return level.value
        return default.value


class ScoreCategory(str, Enum):
    """Category keys in a card scoring result"""
    TECHNICAL_SKILLS = "technicalSkills"
    EXPERIENCE = "experience"
    CULTURAL_FIT = "culturalFit"
    PROJECT_ALIGNMENT = "projectAlignment"
