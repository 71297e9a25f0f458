"""Utility functions for the invoice service."""

from .email import send_email

__all__ = [
    "send_email",
]
