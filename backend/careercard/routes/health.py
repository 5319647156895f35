"""
Health check routes
"""
import firebase_admin
from flask import Blueprint, jsonify

from careercard.config import LLM_MODEL
from careercard.services.llm_client import get_llm_client

health_bp = Blueprint('health', __name__)


@health_bp.route('/ping')
def ping():
    return "pong"


@health_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'services': {
            'llm': {
                'configured': get_llm_client() is not None,
                'model': LLM_MODEL,
            },
            'firebase': 'initialized' if firebase_admin._apps else 'not_initialized',
        }
    })
