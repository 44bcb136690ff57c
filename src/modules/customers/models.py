"""Customer model.

Business rules implemented:
- Email is unique in the system, compared case-insensitively.  The
  comparison key is ``email_key`` (the Unicode case-folded e-mail), kept
  in its own column under a plain unique constraint, so the rule holds
  for non-ASCII addresses regardless of the database collation and
  concurrent inserts cannot both succeed.
- Address is optional; an empty string means "no address".
- VAT number is optional (9 digits, validated at the DTO boundary).
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


def normalize_email_key(email: str) -> str:
    """Return the key two e-mails must share to count as the same customer."""
    return email.casefold()


class Customer(BaseModel):
    """Customer aggregate root.

    Records are created once and never edited; deletion is physical so a
    removed customer's email becomes available again.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254)
    # case-folding can lengthen a string (ß -> ss)
    email_key = models.CharField(max_length=512, editable=False)
    address = models.TextField(blank=True, default="")
    vat_number = models.CharField(max_length=9, blank=True, default="")

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["email_key"],
                name="customers_email_key_unique",
            ),
        ]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    @property
    def has_address(self) -> bool:
        return bool(self.address and self.address.strip())

    def save(self, *args, **kwargs) -> None:
        self.email_key = normalize_email_key(self.email)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
