from book_rental.models.book import Book
from book_rental.extensions import db

class BookRepo:
    @staticmethod
    def list_all():
        return Book.query.order_by(Book.id.desc()).all()

    @staticmethod
    def get_by_external_id(external_id: int):
        return Book.query.filter_by(external_id=external_id).first()

    @staticmethod
    def get_by_external_id_for_update(external_id: int):
        # row lock where the dialect supports it (ignored on SQLite)
        return Book.query.filter_by(external_id=external_id).with_for_update().populate_existing().first()

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()
