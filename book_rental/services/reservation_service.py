from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from book_rental.errors import ConflictError, InvalidStateError, NotFoundError, ServiceError, UnavailableError
from book_rental.models.reservation import Reservation, ReservationStatus
from book_rental.repositories.reservation_repo import ReservationRepo
from book_rental.services.book_service import BookService
from book_rental.services.user_service import UserService


LATE_FEE_PERCENTAGE = Decimal("0.15")  # of the book price, per day late
CENTS = Decimal("0.01")
MAX_RENTAL_DAYS = 365


def _money(value):
    return str(value) if value is not None else None


def _iso(value):
    return value.isoformat() if value is not None else None


class ReservationService:
    @staticmethod
    def calculate_total_fee(daily_rate, rental_days) -> Decimal:
        if daily_rate is None or rental_days is None or rental_days <= 0:
            return Decimal("0.00")
        return (Decimal(daily_rate) * Decimal(rental_days)).quantize(CENTS, rounding=ROUND_HALF_UP)

    @staticmethod
    def calculate_days_late(expected_return_date, return_date) -> int:
        if not expected_return_date or not return_date:
            return 0
        return max(0, (return_date - expected_return_date).days)

    @staticmethod
    def calculate_late_fee(book_price, days_late: int) -> Decimal:
        if book_price is None or days_late <= 0:
            return Decimal("0.00")
        daily_late_fee = Decimal(book_price) * LATE_FEE_PERCENTAGE
        return (daily_late_fee * Decimal(days_late)).quantize(CENTS, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_reservation(user_id: int, book_external_id: int, rental_days: int, start_date: date):
        if rental_days is None:
            raise ServiceError("rental_days is required")
        if rental_days > MAX_RENTAL_DAYS:
            raise ServiceError(f"rental_days must be at most {MAX_RENTAL_DAYS}")
        if start_date is None:
            raise ServiceError("start_date is required")

        try:
            user = UserService.get_user_by_id(user_id)
            book = BookService.get_book_by_external_id(book_external_id)

            if book.available_quantity is None or book.available_quantity <= 0:
                raise UnavailableError(f"No copies available for book with external id: {book_external_id}")

            daily_rate = book.price
            reservation = Reservation(
                user=user,
                book=book,
                rental_days=rental_days,
                daily_rate=daily_rate,
                total_fee=ReservationService.calculate_total_fee(daily_rate, rental_days),
                start_date=start_date,
                expected_return_date=start_date + timedelta(days=rental_days),
                late_fee=Decimal("0.00"),
                status=ReservationStatus.ACTIVE,
            )

            # reservation row first, then the counter; one commit for both
            ReservationRepo.add(reservation)
            BookService.decrease_available_quantity(book.external_id)
            ReservationRepo.commit()
        except StaleDataError:
            ReservationRepo.rollback()
            current_app.logger.warning(f"[reservations] concurrent update on book {book_external_id}")
            raise ConflictError("The book was modified concurrently, please retry")
        except OverflowError:
            ReservationRepo.rollback()
            raise ServiceError("start_date plus rental_days is out of the supported date range")
        except Exception:
            ReservationRepo.rollback()
            raise

        current_app.logger.info(
            f"[reservations] created id={reservation.id} user={user_id} book={book_external_id} "
            f"days={rental_days} total_fee={reservation.total_fee}"
        )
        return reservation

    @staticmethod
    def return_book(reservation_id: int, return_date: date = None):
        try:
            reservation = ReservationRepo.get_for_update(reservation_id)
            if not reservation:
                raise NotFoundError(f"Reservation not found with id: {reservation_id}")

            if reservation.status != ReservationStatus.ACTIVE:
                raise InvalidStateError("The reservation has already been returned")

            if return_date is None:
                return_date = date.today()

            days_late = ReservationService.calculate_days_late(reservation.expected_return_date, return_date)

            # current book price, not the daily rate captured at creation
            reservation.actual_return_date = return_date
            reservation.late_fee = ReservationService.calculate_late_fee(reservation.book.price, days_late)
            reservation.status = ReservationStatus.OVERDUE if days_late > 0 else ReservationStatus.RETURNED

            BookService.increase_available_quantity(reservation.book.external_id)
            ReservationRepo.commit()
        except StaleDataError:
            ReservationRepo.rollback()
            current_app.logger.warning(f"[reservations] concurrent update on reservation {reservation_id}")
            raise ConflictError("The reservation was modified concurrently, please retry")
        except Exception:
            ReservationRepo.rollback()
            raise

        current_app.logger.info(
            f"[reservations] returned id={reservation.id} status={reservation.status.value} "
            f"days_late={days_late} late_fee={reservation.late_fee}"
        )
        return reservation

    @staticmethod
    def get_reservation_by_id(reservation_id: int) -> dict:
        reservation = ReservationRepo.get(reservation_id)
        if not reservation:
            raise NotFoundError(f"Reservation not found with id: {reservation_id}")
        return ReservationService.to_view(reservation)

    @staticmethod
    def get_all_reservations() -> list:
        return [ReservationService.to_view(r) for r in ReservationRepo.list_all()]

    @staticmethod
    def get_reservations_by_user_id(user_id: int) -> list:
        return [ReservationService.to_view(r) for r in ReservationRepo.list_by_user(user_id)]

    @staticmethod
    def get_active_reservations() -> list:
        return [ReservationService.to_view(r) for r in ReservationRepo.list_by_status(ReservationStatus.ACTIVE)]

    @staticmethod
    def get_overdue_reservations(today: date = None) -> list:
        today = today or date.today()
        return [ReservationService.to_view(r) for r in ReservationRepo.find_overdue(today)]

    @staticmethod
    def to_view(reservation: Reservation) -> dict:
        """Response view: reservation fields plus the user's name and the book's title."""
        user = reservation.user
        book = reservation.book
        return {
            "id": reservation.id,
            "user_id": reservation.user_id,
            "user_name": user.name if user else None,
            "book_external_id": book.external_id if book else None,
            "book_title": book.title if book else None,
            "rental_days": reservation.rental_days,
            "start_date": _iso(reservation.start_date),
            "expected_return_date": _iso(reservation.expected_return_date),
            "actual_return_date": _iso(reservation.actual_return_date),
            "daily_rate": _money(reservation.daily_rate),
            "total_fee": _money(reservation.total_fee),
            "late_fee": _money(reservation.late_fee),
            "status": reservation.status.value,
            "created_at": _iso(reservation.created_at),
        }
