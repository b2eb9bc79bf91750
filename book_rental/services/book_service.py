from decimal import Decimal, InvalidOperation

from book_rental.errors import NotFoundError, ServiceError, UnavailableError
from book_rental.models.book import Book
from book_rental.repositories.book_repo import BookRepo


def _parse_price(value):
    if value is None or value == "":
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ServiceError("price must be a number")
    if price < 0:
        raise ServiceError("price must not be negative")
    return price.quantize(Decimal("0.01"))


class BookService:
    @staticmethod
    def list_books():
        return BookRepo.list_all()

    @staticmethod
    def get_book_by_external_id(external_id: int):
        book = BookRepo.get_by_external_id(external_id)
        if not book:
            raise NotFoundError(f"Book not found with external id: {external_id}")
        return book

    @staticmethod
    def create_book(data: dict):
        external_id = int(data["external_id"])
        if BookRepo.get_by_external_id(external_id):
            raise ServiceError(f"A book with external id {external_id} already exists")

        stock = int(data.get("stock_quantity", 1))
        if stock < 0:
            raise ServiceError("stock_quantity must not be negative")

        book = Book(
            external_id=external_id,
            title=data["title"],
            author=data.get("author"),
            price=_parse_price(data.get("price")),
            stock_quantity=stock,
            available_quantity=int(data.get("available_quantity", stock)),
        )
        if book.available_quantity > book.stock_quantity:
            book.available_quantity = book.stock_quantity
        if book.available_quantity < 0:
            book.available_quantity = 0
        return BookRepo.create(book)

    @staticmethod
    def update_book(external_id: int, data: dict):
        book = BookService.get_book_by_external_id(external_id)

        # validate before touching the row
        price = _parse_price(data["price"]) if "price" in data else book.price
        stock = int(data["stock_quantity"]) if "stock_quantity" in data else book.stock_quantity
        available = int(data["available_quantity"]) if "available_quantity" in data else book.available_quantity
        if stock < 0:
            raise ServiceError("stock_quantity must not be negative")

        for k in ["title", "author"]:
            if k in data:
                setattr(book, k, data[k])

        book.price = price
        book.stock_quantity = stock
        # keep 0 <= available <= stock
        book.available_quantity = max(0, min(available, stock))

        BookRepo.update()
        return book

    # The two counter mutators below never commit; the caller's transaction does.

    @staticmethod
    def decrease_available_quantity(external_id: int):
        book = BookRepo.get_by_external_id_for_update(external_id)
        if not book:
            raise NotFoundError(f"Book not found with external id: {external_id}")
        if book.available_quantity is None or book.available_quantity <= 0:
            raise UnavailableError(f"No copies available for book with external id: {external_id}")
        book.available_quantity -= 1
        return book

    @staticmethod
    def increase_available_quantity(external_id: int):
        book = BookRepo.get_by_external_id_for_update(external_id)
        if not book:
            raise NotFoundError(f"Book not found with external id: {external_id}")
        if book.stock_quantity is not None:
            book.available_quantity = min(book.stock_quantity, book.available_quantity + 1)
        else:
            book.available_quantity += 1
        return book

    @staticmethod
    def to_view(book) -> dict:
        return {
            "id": book.id,
            "external_id": book.external_id,
            "title": book.title,
            "author": book.author,
            "price": str(book.price) if book.price is not None else None,
            "stock_quantity": book.stock_quantity,
            "available_quantity": book.available_quantity,
        }
