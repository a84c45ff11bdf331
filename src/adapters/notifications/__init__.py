"""
Adaptateurs de notification.

- EmailNotifier : Notifications par email (SMTP), limitees en debit
- SlidingWindowRateLimiter : Fenetre glissante "N envois par periode"
"""

from src.adapters.notifications.email_notifier import EmailNotifier
from src.adapters.notifications.rate_limiter import SlidingWindowRateLimiter

__all__ = ["EmailNotifier", "SlidingWindowRateLimiter"]
