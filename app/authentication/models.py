"""
Authentication models.

The credential service needs only a stable identity per user: who generated
which credential, and who is an admin. Users register with a code and a
password and log in with the same pair.

Related files:
    - managers.py: UserManager (code-based creation)
    - services.py: AuthService (register, authenticate, token issuing)
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model using the registration code as the login identifier.

    Fields:
        code: Unique login identifier chosen at registration
        username: Display name, defaults to the code
        email: Optional contact address
        role: "user" or "admin"
        is_premium: Premium flag (admins are premium)
        is_active / is_staff: Standard Django flags
        date_joined / updated_at: Timestamps
    """

    code = models.CharField(
        max_length=64,
        unique=True,
        db_index=True,
        help_text="Registration code, used to log in",
    )
    username = models.CharField(
        max_length=150,
        help_text="Display name (defaults to the code)",
    )
    email = models.EmailField(
        max_length=254,
        blank=True,
        default="",
        help_text="Optional contact email",
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
    )
    is_premium = models.BooleanField(default=False)

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "code"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.username or self.code

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
