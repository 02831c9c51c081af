import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import os
import logging
import re
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Email configuration - set these as environment variables
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
FROM_EMAIL = os.getenv("FROM_EMAIL", SMTP_USER)
APP_NAME = os.getenv("APP_NAME", "Dry Clean POS")


def is_email_configured() -> bool:
    return bool(SMTP_USER and SMTP_PASSWORD)


def send_email(to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
    """
    Send an email using SMTP

    Args:
        to_email: Recipient email address
        subject: Email subject
        html_content: HTML content of the email
        text_content: Plain text content (optional, defaults to stripped HTML)

    Returns:
        True if email sent successfully, False otherwise
    """
    if not is_email_configured():
        logger.warning(f"SMTP credentials not configured. Email to {to_email} not sent. Please configure SMTP_USER and SMTP_PASSWORD environment variables.")
        logger.info(f"Subject: {subject}")
        return False

    try:
        # Create message
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = FROM_EMAIL
        message["To"] = to_email

        # Create plain text version if not provided
        if not text_content:
            text_content = html_to_text(html_content)

        # Attach both plain text and HTML versions
        message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))

        # Send email
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as server:
            server.starttls()
            server.login(SMTP_USER, SMTP_PASSWORD)
            server.send_message(message)

        logger.info(f"Email sent successfully to {to_email}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_email}: {str(e)}")
        return False


def html_to_text(html_content: str) -> str:
    text = re.sub(r"<style.*?</style>", "", html_content, flags=re.DOTALL)
    text = re.sub(r"</(div|p|tr|h\d)>|<br\s*/?>", "\n", text)
    text = re.sub(r"<[^>]+>", " ", text)
    lines = [" ".join(line.split()) for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def send_receipt_email(to_email: str, receipt_html: str, transaction_number: str, business_name: Optional[str] = None) -> bool:
    """
    Send a transaction receipt

    Args:
        to_email: Customer email address
        receipt_html: Rendered receipt (see app.utils.receipts)
        transaction_number: Shown in the subject line
        business_name: Sender name shown in the subject line

    Returns:
        True if email sent successfully, False otherwise
    """
    subject = f"Your receipt from {business_name or APP_NAME} ({transaction_number})"
    return send_email(to_email, subject, receipt_html)
