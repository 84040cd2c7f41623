import logging
import secrets
import smtplib
import string

from flask import current_app
from flask_mail import Mail, Message

from errors import UpstreamError
from models import db, EmailOtp

logger = logging.getLogger(__name__)

mail = Mail()

OTP_SUBJECT = 'OTP for Email Verification'


def generate_otp(length=6):
    return ''.join(secrets.choice(string.digits) for _ in range(length))


def _send(message, failure_message):
    try:
        mail.send(message)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception('Mail transport failed for %s', message.recipients)
        raise UpstreamError(failure_message) from exc


def issue_otp(email):
    """Create or overwrite the OTP stored for `email` and mail it out."""
    otp = generate_otp(current_app.config['OTP_LENGTH'])

    record = EmailOtp.query.filter_by(email=email).first()
    if record:
        record.otp = otp
    else:
        db.session.add(EmailOtp(email=email, otp=otp))
    db.session.commit()
    logger.info('Email saved: %s', email)
    logger.debug('Generated OTP for %s: %s', email, otp)

    message = Message(
        OTP_SUBJECT,
        recipients=[email],
        body=f'Your OTP for email verification is: {otp}',
    )
    _send(message, 'Error handling email submission')
    logger.info('OTP sent to: %s', email)
    return otp


def verify_otp(email, otp):
    """None if the address never requested a code, else whether `otp` matches."""
    record = EmailOtp.query.filter_by(email=email).first()
    if record is None:
        return None
    return record.otp == otp


def count_emails():
    return EmailOtp.query.count()


def relay_email(to, subject, body):
    message = Message(subject or '', recipients=[to], body=body or '')
    _send(message, 'Failed to send email')
    logger.info('Email sent successfully to %s', to)
