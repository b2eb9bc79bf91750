from datetime import date

from book_rental.extensions import db
from book_rental.models.reservation import Reservation, ReservationStatus

class ReservationRepo:
    @staticmethod
    def get(reservation_id: int):
        return db.session.get(Reservation, reservation_id)

    @staticmethod
    def get_for_update(reservation_id: int):
        return Reservation.query.filter_by(id=reservation_id).with_for_update().populate_existing().first()

    @staticmethod
    def list_all():
        return Reservation.query.order_by(Reservation.id.desc()).all()

    @staticmethod
    def list_by_user(user_id: int):
        return Reservation.query.filter_by(user_id=user_id).order_by(Reservation.id.desc()).all()

    @staticmethod
    def list_by_status(status: ReservationStatus):
        return Reservation.query.filter_by(status=status).order_by(Reservation.id.desc()).all()

    @staticmethod
    def find_overdue(today: date):
        return Reservation.query.filter(
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.expected_return_date < today
        ).order_by(Reservation.expected_return_date).all()

    @staticmethod
    def add(reservation: Reservation):
        # no commit: the service owns the transaction
        db.session.add(reservation)
        db.session.flush()
        return reservation

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
