from book_rental.models.user import User
from book_rental.models.book import Book
from book_rental.models.reservation import Reservation, ReservationStatus
from book_rental.models.notification_log import NotificationLog

__all__ = ["User", "Book", "Reservation", "ReservationStatus", "NotificationLog"]
