"""Service for sending transactional emails."""

import logging
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP.

    Without SMTP settings the service stays disabled and logs the links it
    would have sent, which is enough for local development.
    """

    def __init__(
        self,
        base_url: str,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "ParkEase",
    ):
        self.base_url = base_url.rstrip("/")
        self.smtp_host = smtp_host or os.getenv("SMTP_HOST", "")
        self.smtp_port = smtp_port or int(os.getenv("SMTP_PORT", "587"))
        self.smtp_username = smtp_username or os.getenv("SMTP_USERNAME", "")
        self.smtp_password = smtp_password or os.getenv("SMTP_PASSWORD", "")
        self.from_email = from_email or os.getenv("SMTP_FROM_EMAIL", "")
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def build_link(self, path: str, **params: Optional[str]) -> str:
        query = urlencode({key: value for key, value in params.items() if value})
        return f"{self.base_url}{path}?{query}" if query else f"{self.base_url}{path}"

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        """
        Send email verification email.

        Args:
            to_email: Recipient email
            verification_token: Raw verification token

        Returns:
            True if sent successfully, False otherwise
        """
        verification_url = self.build_link("/auth/verify-email", token=verification_token)
        return self._send_link(
            to_email,
            subject="Verify your email - ParkEase",
            heading="Email verification",
            intro="Please click the button below to verify your email address.",
            button="Verify email",
            url=verification_url,
        )

    def send_password_reset_email(self, to_email: str, reset_token: str) -> bool:
        reset_url = self.build_link("/auth/reset-password", token=reset_token)
        return self._send_link(
            to_email,
            subject="Reset your password - ParkEase",
            heading="Password reset",
            intro="We received a request to reset your password. If it was not you, ignore this email.",
            button="Reset password",
            url=reset_url,
        )

    def send_magic_link(self, to_email: str, magic_link: str) -> bool:
        return self._send_link(
            to_email,
            subject="Your sign-in link - ParkEase",
            heading="Sign in to ParkEase",
            intro="Use the button below to sign in. The link works once.",
            button="Sign in",
            url=magic_link,
        )

    def _send_link(self, to_email: str, subject: str, heading: str, intro: str, button: str, url: str) -> bool:
        if not self.enabled:
            logger.info("[EMAIL] %s for %s: %s", heading, to_email, url)
            return True

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">{heading}</h2>
                <p style="color: #475569; line-height: 1.6;">{intro}</p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{url}"
                       style="background-color: #2563eb; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; display: inline-block;
                              font-weight: bold;">
                        {button}
                    </a>
                </div>
                <p style="color: #64748b; font-size: 14px;">This link expires in 1 hour.</p>
            </body>
        </html>
        """

        text_body = f"""
        ParkEase - {heading}

        {intro}
        {url}

        This link expires in 1 hour.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s", to_email)
            return False
