from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Marketplace member; the same account can host cars and rent them."""

    display_name = models.CharField(max_length=120, blank=True)
    phone = models.CharField(max_length=30, blank=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return self.display_name or self.full_name or self.email
