import smtplib
from html import escape
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Any, Dict, Optional

from booking_api.core.config import Settings
from booking_api.core.errors import NotificationError
from booking_api.core.logger import logger
from booking_api.models.booking_models import BOOKING_FIELDS

CONFIRMATION_SUBJECT = "Demo Booking Confirmation - Enervalix"

CONFIRMATION_TEMPLATE = """
<h2>Thank you for your interest in Enervalix!</h2>
<p>Dear {name},</p>
<p>We've received your demo booking request and our team will contact you shortly to schedule your personalized demonstration.</p>
<p>In the meantime, feel free to explore our <a href="{site_url}/features.html">features page</a> to learn more about how Enervalix can help optimize your energy consumption and reduce carbon emissions.</p>
<p>Best regards,<br>The Enervalix Team</p>
"""

ADMIN_ALERT_SUBJECT = "New Demo Booking Request #{booking_id}"

ADMIN_ALERT_TEMPLATE = """
<h2>New Demo Booking Request</h2>
<p><strong>Booking ID:</strong> {booking_id}</p>
<p><strong>Name:</strong> {name}</p>
<p><strong>Email:</strong> {email}</p>
<p><strong>Phone:</strong> {phone}</p>
<p><strong>Organization:</strong> {organization}</p>
<p><strong>Organization Type:</strong> {org_type}</p>
<p><strong>Preferred Date:</strong> {preferred_date}</p>
<p><strong>Preferred Time:</strong> {preferred_time_slot}</p>
<p><strong>Message:</strong> {message}</p>
"""


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    user: str
    password: str


def smtp_config_from_settings(settings: Settings) -> Optional[SmtpConfig]:
    """SMTP is usable only when host, user and password are all set."""
    if settings.SMTP_HOST and settings.SMTP_USER and settings.SMTP_PASS:
        return SmtpConfig(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASS,
        )
    return None


class EmailNotifier:
    """
    Sends the visitor confirmation and the admin alert.
    Without an SmtpConfig every call is a logged no-op. Send failures are
    logged and swallowed; callers only get a bool back.
    """

    def __init__(self, smtp: Optional[SmtpConfig], from_email: str = "",
                 admin_email: str = "", site_url: str = ""):
        self.smtp = smtp
        self.from_email = from_email or (smtp.user if smtp else "")
        self.admin_email = admin_email
        self.site_url = site_url

    @property
    def enabled(self) -> bool:
        return self.smtp is not None

    def _send(self, to_email: str, subject: str, html: str):
        if not to_email:
            raise NotificationError("No recipient address")

        msg = MIMEMultipart()
        msg['From'] = self.from_email
        msg['To'] = to_email
        msg['Subject'] = subject
        msg.attach(MIMEText(html, 'html'))

        try:
            server = smtplib.SMTP(self.smtp.host, self.smtp.port)
            try:
                server.starttls()
                server.login(self.smtp.user, self.smtp.password)
                server.sendmail(self.from_email, to_email, msg.as_string())
            finally:
                server.quit()
        except Exception as e:
            raise NotificationError(str(e)) from e

    def send_confirmation(self, email: str, name: str) -> bool:
        if not self.enabled:
            logger.info(f"ℹ️ SMTP not configured - skipping confirmation email to {email}")
            return False

        try:
            html = CONFIRMATION_TEMPLATE.format(name=escape(name), site_url=self.site_url)
            self._send(email, CONFIRMATION_SUBJECT, html)
            logger.info(f"✅ Confirmation email sent to {email}")
            return True
        except NotificationError as e:
            logger.error(f"❌ Error sending confirmation email: {e}")
            return False

    def send_admin_alert(self, booking_id: int, fields: Dict[str, Any]) -> bool:
        if not self.enabled:
            logger.info(f"ℹ️ SMTP not configured - skipping admin notification for booking #{booking_id}")
            return False

        try:
            values = {key: escape(str(fields.get(key) or "N/A")) for key in BOOKING_FIELDS}
            html = ADMIN_ALERT_TEMPLATE.format(booking_id=booking_id, **values)
            subject = ADMIN_ALERT_SUBJECT.format(booking_id=booking_id)
            self._send(self.admin_email, subject, html)
            logger.info(f"✅ Admin notification sent for booking #{booking_id}")
            return True
        except NotificationError as e:
            logger.error(f"❌ Error sending admin notification: {e}")
            return False


def build_notifier(settings: Settings) -> EmailNotifier:
    smtp = smtp_config_from_settings(settings)
    if smtp:
        logger.info(f"📧 Email transporter configured ({smtp.host}:{smtp.port})")
    else:
        logger.info("ℹ️ SMTP not configured - emails will be skipped")

    return EmailNotifier(
        smtp,
        from_email=settings.FROM_EMAIL,
        admin_email=settings.ADMIN_EMAIL,
        site_url=settings.public_url,
    )
