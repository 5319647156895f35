"""
Career card persistence routes - save, update and share cards
"""
from flask import Blueprint, jsonify, request

from careercard.extensions import current_user_id, require_firebase_auth
from careercard.models.career_card import format_card_response
from careercard.services.career_cards import create_card, get_card, update_card
from careercard.utils.validation import CareerCardWriteRequest, validate_request

career_cards_bp = Blueprint('career_cards', __name__, url_prefix='/api/career-cards')


@career_cards_bp.route('', methods=['POST'])
@require_firebase_auth
def create_card_route():
    """Save a new card for the signed-in user. Body: {"cardData": {...}}"""
    data = validate_request(CareerCardWriteRequest, request.get_json(silent=True))
    record = create_card(current_user_id(), data['cardData'])
    return jsonify(format_card_response(record)), 201


@career_cards_bp.route('/<card_id>', methods=['PUT'])
@require_firebase_auth
def update_card_route(card_id):
    """Replace the data of one of the signed-in user's cards."""
    data = validate_request(CareerCardWriteRequest, request.get_json(silent=True))
    record = update_card(card_id, current_user_id(), data['cardData'])
    return jsonify(format_card_response(record)), 200


@career_cards_bp.route('/<card_id>', methods=['GET'])
def get_card_route(card_id):
    """Public read used by share links."""
    return jsonify(format_card_response(get_card(card_id))), 200
