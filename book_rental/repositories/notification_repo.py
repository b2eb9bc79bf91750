from book_rental.models.notification_log import NotificationLog

class NotificationRepo:
    @staticmethod
    def already_sent(reservation_id: int, notif_type: str = "overdue_reminder") -> bool:
        return NotificationLog.query.filter_by(
            reservation_id=reservation_id, type=notif_type, success=True
        ).first() is not None

