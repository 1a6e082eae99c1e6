"""Credentials: password hashing, signed access tokens and one-time codes."""
