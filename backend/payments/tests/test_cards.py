import pytest

from accounts.models import User
from payments.models import SavedCard
from payments.services.cards import card_fingerprint, save_card_once


@pytest.fixture
def user(db):
    return User.objects.create_user(username="tenant@example.com", email="tenant@example.com", password="password123")


def test_fingerprint_is_keyed_and_opaque():
    number = "4111111111111111"

    assert card_fingerprint(number, key="a") == card_fingerprint(number, key="a")
    assert card_fingerprint(number, key="a") != card_fingerprint(number, key="b")
    assert number not in card_fingerprint(number, key="a")


@pytest.mark.django_db
def test_card_saved_once_per_user(user):
    card, created = save_card_once(user_id=user.id, card_number="4111111111111111", card_holder="Tess", expiry="01/28")
    again, created_again = save_card_once(
        user_id=user.id,
        card_number="4111111111111111",
        card_holder="Tess T.",
        expiry="02/29",
    )

    assert created is True
    assert created_again is False
    assert again.pk == card.pk
    assert again.card_holder == "Tess"
    assert card.last_four == "1111"
    assert SavedCard.objects.count() == 1


@pytest.mark.django_db
def test_different_cards_are_kept_separately(user):
    save_card_once(user_id=user.id, card_number="4111111111111111", card_holder="Tess", expiry="01/28")
    save_card_once(user_id=user.id, card_number="5500000000000004", card_holder="Tess", expiry="01/28")

    assert set(SavedCard.objects.values_list("last_four", flat=True)) == {"1111", "0004"}


@pytest.mark.django_db
def test_same_card_for_different_users(user):
    other = User.objects.create_user(username="other@example.com", email="other@example.com", password="password123")

    save_card_once(user_id=user.id, card_number="4111111111111111", card_holder="Tess", expiry="01/28")
    save_card_once(user_id=other.id, card_number="4111111111111111", card_holder="Otto", expiry="01/28")

    assert SavedCard.objects.count() == 2
