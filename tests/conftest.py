import pytest

from book_rental import create_app
from book_rental.config import TestConfig
from book_rental.extensions import db
from book_rental.services.auth_service import AuthService
from book_rental.services.book_service import BookService


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(name="Juan Perez", role="user", email=None):
        counter["n"] += 1
        n = counter["n"]
        return AuthService.register(
            name=name,
            username=f"user{n}",
            email=email or f"user{n}@example.com",
            password="secret",
            role=role,
        )
    return _make


@pytest.fixture
def make_book(app):
    def _make(external_id=258027, title="The Lord of the Rings", price="15.99", stock=10, available=5):
        return BookService.create_book({
            "external_id": external_id,
            "title": title,
            "author": "J. R. R. Tolkien",
            "price": price,
            "stock_quantity": stock,
            "available_quantity": available,
        })
    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        return {"Authorization": f"Bearer {AuthService.issue_token(user)}"}
    return _header
