"""
Career card store - one Firestore document per card, keyed by a UUID
"""
import logging
from datetime import datetime, timezone
from typing import Dict

from careercard.config import CAREER_CARDS_COLLECTION
from careercard.extensions import get_db
from careercard.models.career_card import create_card_record, is_card_id
from careercard.utils.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


def _collection():
    return get_db().collection(CAREER_CARDS_COLLECTION)


def _load(card_id: str):
    """Return (document reference, stored record) or raise NotFoundError."""
    if not is_card_id(card_id):
        raise NotFoundError("Career card")
    ref = _collection().document(card_id)
    snapshot = ref.get()
    if not snapshot.exists:
        raise NotFoundError("Career card")
    return ref, snapshot.to_dict() or {}


def create_card(owner_id: str, card_data: Dict) -> Dict:
    """Store a new card for ``owner_id`` and return the record."""
    record = create_card_record(owner_id, card_data)
    _collection().document(record['id']).set(record)
    logger.info("Career card created", extra={'card_id': record['id']})
    return record


def update_card(card_id: str, owner_id: str, card_data: Dict) -> Dict:
    """Replace the card data of a card owned by ``owner_id``."""
    ref, record = _load(card_id)
    if record.get('user_id') != owner_id:
        logger.warning("Refused update of a card owned by another user", extra={'card_id': card_id})
        raise AuthorizationError("You can only update your own career cards")

    changes = {
        'card_data': card_data,
        'updated_at': datetime.now(timezone.utc).isoformat(),
    }
    ref.update(changes)
    record.update(changes)
    logger.info("Career card updated", extra={'card_id': card_id})
    return record


def get_card(card_id: str) -> Dict:
    """Fetch a card by id (public: cards are shared by link)."""
    _, record = _load(card_id)
    record.setdefault('id', card_id)
    return record
