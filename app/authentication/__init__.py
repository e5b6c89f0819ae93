"""
Authentication application.

Registration-code based accounts, Django sessions and JWT token pairs.

Key components:
    - User model: Login by registration code, optional email, user/admin role
    - AuthService: register, authenticate, issue_tokens

Usage:
    from authentication.models import User
    from authentication.services import AuthService
"""
