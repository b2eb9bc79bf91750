from flask import Flask, jsonify
from book_rental.config import Config
from book_rental.extensions import db, migrate, jwt, mail

from book_rental.db_objects_mssql import ensure_db_objects_mssql


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) db first (db.engine / db.session need it)
    db.init_app(app)

    # models must be imported before create_all / migrations see them
    from book_rental import models  # noqa: F401

    # 2) MSSQL-only trigger, after db init
    ensure_db_objects_mssql(app)

    # 3) remaining extensions
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    # 4) API blueprints
    from book_rental.controllers.auth_controller import auth_bp
    from book_rental.controllers.book_controller import book_bp
    from book_rental.controllers.reservation_controller import reservation_bp
    from book_rental.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(reservation_bp, url_prefix="/reservations")
    app.register_blueprint(notif_bp, url_prefix="/notifications")

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    from book_rental.cli import register_cli
    register_cli(app)

    # overdue reminders
    from book_rental.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
