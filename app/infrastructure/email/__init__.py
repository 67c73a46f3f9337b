from app.infrastructure.email.mailer import ResendMailer

__all__ = ["ResendMailer"]
