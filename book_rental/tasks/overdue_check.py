# book_rental/tasks/overdue_check.py
from datetime import date

from book_rental.extensions import db
from book_rental.repositories.notification_repo import NotificationRepo
from book_rental.repositories.reservation_repo import ReservationRepo
from book_rental.services.mail_service import MailService
from book_rental.services.reservation_service import ReservationService


def run_overdue_check_job(app, today: date = None) -> dict:
    """
    Sends one reminder per overdue ACTIVE reservation.
    - overdue: status ACTIVE and expected_return_date < today
    - the accrued late fee is only reported; it is charged on return
    - reservation status is left alone (it only changes on return)
    Returns the counters that are also logged.
    """
    with app.app_context():
        today = today or date.today()
        stats = {"overdue": 0, "already_notified": 0, "sent": 0, "failed": 0}
        try:
            overdue_rows = ReservationRepo.find_overdue(today)
            stats["overdue"] = len(overdue_rows)

            for r in overdue_rows:
                if NotificationRepo.already_sent(r.id, "overdue_reminder"):
                    stats["already_notified"] += 1
                    continue

                days_late = ReservationService.calculate_days_late(r.expected_return_date, today)
                accrued = ReservationService.calculate_late_fee(r.book.price if r.book else None, days_late)

                if MailService.send_overdue_reminder(r, days_late, accrued):
                    stats["sent"] += 1
                else:
                    stats["failed"] += 1

            db.session.commit()

            app.logger.info(
                f"[overdue_check] overdue={stats['overdue']} sent={stats['sent']} "
                f"failed={stats['failed']} already_notified={stats['already_notified']}"
            )
        except Exception as e:
            db.session.rollback()
            app.logger.exception(f"[overdue_check] error: {e}")
            raise
        return stats
