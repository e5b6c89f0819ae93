"""
Custom user manager for code-based authentication.

Users log in with the registration code they signed up with, so the code
(not an email or username) is the identifier passed to create_user().

Related files:
    - models.py: User model that uses this manager
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User with ``code`` as the login identifier.

    Usage:
        user = User.objects.create_user(code="NOVA-1234", password="secret1")
        admin = User.objects.create_superuser(code="root", password="secret1")
    """

    def create_user(self, code, password=None, **extra_fields):
        """
        Create and save a regular user.

        Args:
            code: Login identifier (required)
            password: Raw password, hashed before saving
            **extra_fields: username, email, role, is_premium...

        Raises:
            ValueError: If code is not provided
        """
        if not code:
            raise ValueError("The code field must be set")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("username", code)

        email = extra_fields.pop("email", None)
        if email:
            extra_fields["email"] = self.normalize_email(email)

        user = self.model(code=code, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, code, password=None, **extra_fields):
        """
        Create and save a superuser with the admin role.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        from authentication.models import UserRole

        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", UserRole.ADMIN)
        extra_fields.setdefault("is_premium", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(code, password, **extra_fields)
