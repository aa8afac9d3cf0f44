"""Outbound email"""
from src.infrastructure.external.email.smtp_notifier import SmtpNotifier

__all__ = ["SmtpNotifier"]
