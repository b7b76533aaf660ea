from .smtp_mailer import SmtpMailer

__all__ = ["SmtpMailer"]
