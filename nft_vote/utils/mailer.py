from flask_mail import Message
from flask import current_app
from ..extensions import mail


def send_code_email(to_email: str, code: str) -> None:
    """
    Deliver a one-time login code. With MAIL_ENABLED off (development) the
    code is written to the application log instead.
    """
    if not current_app.config.get("MAIL_ENABLED"):
        current_app.logger.info("Verification code for %s: %s", to_email, code)
        return

    sender = current_app.config.get("MAIL_DEFAULT_SENDER")
    if not sender:
        # Fail fast with a meaningful message (instead of Flask-Mail assertion)
        raise RuntimeError(
            "MAIL_DEFAULT_SENDER is not configured. Set MAIL_DEFAULT_SENDER in .env"
        )

    subject = "NFT Voting - your verification code"
    body = (
        f"Your verification code is: {code}\n\n"
        f"It expires in {current_app.config['OTP_TTL_SECONDS'] // 60} minutes.\n"
        "If you did not request this code, please ignore this email."
    )
    msg = Message(subject=subject, recipients=[to_email], body=body, sender=sender)
    mail.send(msg)
