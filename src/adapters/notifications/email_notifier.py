"""
Notifications email via SMTP.

Implemente INotifier avec smtplib (bibliotheque standard). Les envois :
- sont ignores si l'email est desactive ou incompletement configure
- respectent les drapeaux notify_on_success / notify_on_error / notify_on_completion
- sont limites a max_emails_per_hour sur une fenetre glissante d'une heure
- ne levent jamais d'exception (echecs SMTP journalises)

L'envoi SMTP est bloquant : il est delegue a un thread (asyncio.to_thread).
"""

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from html import escape

from loguru import logger

from src.adapters.notifications.rate_limiter import SlidingWindowRateLimiter
from src.config import Settings
from src.core.ports.notifications import INotifier


class EmailNotifier(INotifier):
    """Notifier email avec limitation de debit."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._limiter = SlidingWindowRateLimiter(
            max_events=settings.max_emails_per_hour, window_seconds=3600.0
        )

    @property
    def enabled(self) -> bool:
        return self._settings.email_configured

    async def notify_success(self, title: str, source_path: str, destination_path: str) -> None:
        if not self._settings.notify_on_success:
            return
        await self._send(
            f"PlexOrg - Traite : {title}",
            f"<h2>Fichier organise</h2>"
            f"<p><b>{escape(title)}</b></p>"
            f"<p>Source : {escape(source_path)}<br>"
            f"Destination : {escape(destination_path)}</p>",
        )

    async def notify_error(self, title: str, source_path: str, message: str) -> None:
        if not self._settings.notify_on_error:
            return
        await self._send(
            f"PlexOrg - Erreur : {title}",
            f"<h2>Echec du traitement</h2>"
            f"<p><b>{escape(title)}</b></p>"
            f"<p>Source : {escape(source_path)}</p>"
            f"<p style='color:#b00'>{escape(message)}</p>",
        )

    async def notify_batch_completion(self, total: int, success: int, error: int) -> None:
        if not self._settings.notify_on_completion:
            return
        await self._send(
            "PlexOrg - Scan termine",
            f"<h2>Scan termine</h2>"
            f"<ul><li>Fichiers traites : {total}</li>"
            f"<li>Succes : {success}</li>"
            f"<li>Erreurs : {error}</li></ul>",
        )

    async def _send(self, subject: str, html_body: str) -> None:
        if not self.enabled:
            logger.debug("Email desactive, notification ignoree", subject=subject)
            return

        message = self._build_message(subject, html_body)
        try:
            sent = await self._limiter.run(lambda: asyncio.to_thread(self._deliver, message))
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Echec de l'envoi d'email", subject=subject, error=str(e))
            return

        if sent is None:
            logger.warning(
                "Quota d'emails atteint, notification supprimee",
                subject=subject,
                max_per_hour=self._settings.max_emails_per_hour,
            )
        else:
            logger.debug("Email envoye", subject=subject)

    def _build_message(self, subject: str, html_body: str) -> EmailMessage:
        settings = self._settings
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((settings.email_from_name, settings.email_from or ""))
        message["To"] = ", ".join(settings.email_to)
        message.set_content("Ce message necessite un client compatible HTML.")
        message.add_alternative(f"<html><body>{html_body}</body></html>", subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> bool:
        """Envoi SMTP bloquant (SSL implicite sur le port 465, STARTTLS sinon)."""
        settings = self._settings
        if settings.smtp_use_ssl and settings.smtp_port == 465:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(settings.smtp_server or "", settings.smtp_port, timeout=30)
        else:
            smtp = smtplib.SMTP(settings.smtp_server or "", settings.smtp_port, timeout=30)
        with smtp:
            if settings.smtp_use_ssl and settings.smtp_port != 465:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password or "")
            smtp.send_message(message)
        return True
