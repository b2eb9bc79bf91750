from sqlalchemy import text
from book_rental.extensions import db

STOCK_GUARD_TRIGGER_SQL = r"""
IF OBJECT_ID(N'dbo.trg_books_available_guard', N'TR') IS NULL
BEGIN
    EXEC('
    CREATE TRIGGER dbo.trg_books_available_guard
    ON dbo.books
    AFTER INSERT, UPDATE
    AS
    BEGIN
        SET NOCOUNT ON;

        UPDATE b
        SET
            b.available_quantity =
                CASE
                    WHEN b.available_quantity < 0 THEN 0
                    WHEN b.available_quantity > b.stock_quantity THEN b.stock_quantity
                    ELSE b.available_quantity
                END
        FROM dbo.books b
        INNER JOIN inserted i ON i.id = b.id;
    END
    ')
END
"""


def ensure_db_objects_mssql(app) -> bool:
    """
    Creates the books stock guard trigger on SQL Server.
    Other dialects are skipped; the service layer enforces the same bounds.
    Returns True when the trigger statement ran.
    """
    with app.app_context():
        engine = db.engine
        if engine.dialect.name != "mssql":
            app.logger.debug(f"[db_objects] dialect {engine.dialect.name}: MSSQL objects skipped.")
            return False

        try:
            with engine.begin() as conn:
                conn.execute(text(STOCK_GUARD_TRIGGER_SQL))
            app.logger.info("[db_objects] books stock guard trigger ensured.")
            return True
        except Exception as e:
            # the books table may not exist before the first migration
            app.logger.warning(f"[db_objects] trigger not created: {e}")
            return False
