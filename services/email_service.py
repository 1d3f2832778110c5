"""Email Service.
Sends the account emails (verification, password reset, welcome) through
Flask-Mail and runs them fire-and-forget so auth operations never block on,
or fail because of, email delivery.
"""
import threading

from flask import current_app
from flask_mail import Message
from extensions import mail


class EmailService:

    def send_verification_email(self, to, name, token):
        """Send the email-verification link"""
        verification_url = f"{self._frontend_url()}/verify-email?token={token}"
        subject = f"Verify Your Email - {self._brand()}"
        body = f"""
Hi {name},

Welcome to {self._brand()}! Please verify your email address by opening the link below:

{verification_url}

This link will expire in {current_app.config.get('VERIFICATION_TOKEN_HOURS', 24)} hours.

If you didn't create this account, please ignore this email.

Best regards,
{self._brand()} Team
        """.strip()
        return self._send(to, subject, body, link=verification_url)

    def send_password_reset_email(self, to, name, token):
        """Send the password reset link"""
        reset_url = f"{self._frontend_url()}/reset-password?token={token}"
        subject = f"Password Reset - {self._brand()}"
        body = f"""
Hi {name},

We received a request to reset your password. Open the link below to choose a new one:

{reset_url}

This link will expire in {current_app.config.get('RESET_TOKEN_HOURS', 1)} hour(s).

If you didn't request a password reset, you can safely ignore this email.

Best regards,
{self._brand()} Team
        """.strip()
        return self._send(to, subject, body, link=reset_url)

    def send_welcome_email(self, to, name):
        """Send the welcome email once the address is verified"""
        subject = f"Welcome to {self._brand()}!"
        body = f"""
Hi {name},

Your email address is verified and your account is ready. You can now search
daycares, save favorites and contact providers.

{self._frontend_url()}

Best regards,
{self._brand()} Team
        """.strip()
        return self._send(to, subject, body)

    def dispatch(self, send, *args, on_failure=None):
        """Run ``send(*args)`` without blocking the caller.

        ``send`` returns ``(success, error)``. ``on_failure`` is called with the
        error inside an application context when delivery fails. With
        ``EMAIL_DISPATCH_ASYNC`` disabled the send runs inline.
        """
        app = current_app._get_current_object()
        if not app.config.get('EMAIL_DISPATCH_ASYNC', True):
            self._execute(app, send, args, on_failure)
            return None

        thread = threading.Thread(target=self._run, args=(app, send, args, on_failure), daemon=True)
        thread.start()
        return thread

    def _run(self, app, send, args, on_failure):
        with app.app_context():
            self._execute(app, send, args, on_failure)

    @staticmethod
    def _execute(app, send, args, on_failure):
        try:
            success, error = send(*args)
        except Exception as e:
            app.logger.error(f'Email dispatch error: {e}')
            success, error = False, str(e)

        if success:
            return
        app.logger.warning(f'Email dispatch failed: {error}')
        if on_failure is not None:
            try:
                on_failure(error)
            except Exception as e:
                app.logger.error(f'Email failure callback error: {e}')

    def _send(self, to, subject, body, link=None):
        if not current_app.config.get('MAIL_SERVER'):
            if link:
                current_app.logger.info(f'Email not configured. Link for {to}: {link}')
            return False, 'Email service not configured'

        try:
            msg = Message(
                subject=subject,
                sender=current_app.config['MAIL_DEFAULT_SENDER'],
                recipients=[to]
            )
            msg.body = body
            mail.send(msg)
            current_app.logger.info(f'Email "{subject}" sent to {to}')
            return True, None
        except Exception as e:
            current_app.logger.error(f'Failed to send email to {to}: {e}')
            return False, str(e)

    @staticmethod
    def _brand():
        return current_app.config.get('MAIL_BRAND_NAME', 'KinderBridge')

    @staticmethod
    def _frontend_url():
        return current_app.config.get('FRONTEND_URL', '').rstrip('/')
