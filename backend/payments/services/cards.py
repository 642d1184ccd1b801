from __future__ import annotations

import hashlib
import hmac

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS

from payments.models import SavedCard


def card_fingerprint(card_number: str, *, key: str | None = None) -> str:
    secret = key if key is not None else settings.CARD_FINGERPRINT_KEY
    return hmac.new(secret.encode("utf-8"), card_number.encode("utf-8"), hashlib.sha256).hexdigest()


def save_card_once(
    *,
    user_id,
    card_number: str,
    card_holder: str,
    expiry: str,
    using: str = DEFAULT_DB_ALIAS,
) -> tuple[SavedCard, bool]:
    """Remember a card for the user unless the same number is already saved.

    ``card_number`` must already be normalized (digits only). Returns the card
    and whether it was created.
    """

    return SavedCard.objects.using(using).get_or_create(
        user_id=user_id,
        fingerprint=card_fingerprint(card_number),
        defaults={
            "card_holder": card_holder,
            "expiry": expiry,
            "last_four": card_number[-4:],
        },
    )
