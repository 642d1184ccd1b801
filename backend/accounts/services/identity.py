"""Account lookup by email, registration, profile changes and token issue.

Email is the login identifier. It is stored lower-cased and mirrored into
``username`` so Django's auth machinery and the admin keep working.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.exceptions import EmailTaken, InvalidCredentials
from accounts.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(email: str) -> User | None:
    return User.objects.filter(email__iexact=normalize_email(email)).first()


def ensure_email_free(email: str, *, exclude: User | None = None) -> None:
    taken = User.objects.filter(email__iexact=normalize_email(email))
    if exclude is not None:
        taken = taken.exclude(pk=exclude.pk)
    if taken.exists():
        raise EmailTaken()


def register_user(*, email: str, password: str, first_name: str = "", last_name: str = "", phone: str = "") -> User:
    email = normalize_email(email)
    ensure_email_free(email)
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
            )
    except IntegrityError:
        # Lost a race with a concurrent registration for the same address.
        raise EmailTaken()
    user.display_name = user.full_name or email
    user.save(update_fields=["display_name"])
    logger.info("Registered user %s", user.pk)
    return user


def authenticate_email(email: str, password: str) -> User:
    user = find_by_email(email)
    if user is None:
        # Hash anyway so unknown addresses cost the same as wrong passwords.
        User().set_password(password)
        raise InvalidCredentials()
    if not user.is_active or not user.check_password(password):
        raise InvalidCredentials()
    return user


def update_profile(user: User, changes: dict) -> User:
    changes = dict(changes)
    if "email" in changes:
        email = normalize_email(changes["email"])
        ensure_email_free(email, exclude=user)
        changes["email"] = email
        changes["username"] = email
    for attr, value in changes.items():
        setattr(user, attr, value)
    if not user.display_name:
        user.display_name = user.full_name or user.email
    user.save()
    return user


def issue_tokens(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "accessToken": str(refresh.access_token),
        "refreshToken": str(refresh),
        "expiresIn": int(api_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
    }
