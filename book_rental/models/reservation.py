import enum
from datetime import datetime
from decimal import Decimal

from book_rental.extensions import db


class ReservationStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


class Reservation(db.Model):
    __tablename__ = "reservations"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    rental_days = db.Column(db.Integer, nullable=False)
    daily_rate = db.Column(db.Numeric(10, 2), nullable=True)
    total_fee = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    start_date = db.Column(db.Date, nullable=False)
    expected_return_date = db.Column(db.Date, nullable=False, index=True)
    actual_return_date = db.Column(db.Date, nullable=True)

    late_fee = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    status = db.Column(
        db.Enum(ReservationStatus, name="reservation_status"),
        nullable=False,
        default=ReservationStatus.ACTIVE,
        index=True,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    version_id = db.Column(db.Integer, nullable=False)

    user = db.relationship("User", backref="reservations")
    book = db.relationship("Book", backref="reservations")

    __mapper_args__ = {"version_id_col": version_id}
