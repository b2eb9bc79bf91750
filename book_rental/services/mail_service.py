# book_rental/services/mail_service.py
from __future__ import annotations

from datetime import datetime
from flask import current_app
from flask_mail import Message

from book_rental.extensions import db, mail
from book_rental.models.notification_log import NotificationLog


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[MailService] could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        reservation_id: int,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
        commit: bool = False,  # the job commits once at the end
    ) -> NotificationLog:
        row = NotificationLog(
            reservation_id=reservation_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=datetime.utcnow(),
        )
        db.session.add(row)
        if commit:
            db.session.commit()
        return row

    @staticmethod
    def send_overdue_reminder(reservation, days_late: int, accrued_fee) -> bool:
        """
        Emails the reservation's user about an overdue book and logs the attempt.
        Does not commit.
        """
        user = reservation.user
        book = reservation.book
        to_email = getattr(user, "email", None)
        name = getattr(user, "name", None) or "reader"
        title = getattr(book, "title", None) or f"Book #{reservation.book_id}"

        subject = "Library: overdue book reminder"
        body = (
            f"Hello {name},\n\n"
            f"'{title}' was due back on {reservation.expected_return_date}.\n"
            f"It is {days_late} day(s) late; the late fee so far is {accrued_fee}.\n\n"
            f"Please return it as soon as possible.\n"
        )

        if not to_email:
            MailService.log_notification(
                reservation_id=reservation.id,
                notif_type="overdue_reminder",
                to_email=None,
                message="User has no email address",
                success=False,
                error="missing_email",
            )
            return False

        ok, err = MailService.send_email(to_email, subject, body)

        MailService.log_notification(
            reservation_id=reservation.id,
            notif_type="overdue_reminder",
            to_email=to_email,
            message=body if ok else "Mail could not be sent",
            success=ok,
            error=err,
        )
        return ok
