from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from library_api.config import Config
from library_api.docs import init_docs
from library_api.errors import AppError
from library_api.extensions import configure_sqlite, cors, db, migrate, jwt


def _register_error_handlers(app):
    @app.errorhandler(AppError)
    def _app_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return jsonify({
            "success": False,
            "error": e.name.lower().replace(" ", "_"),
            "message": e.description,
        }), e.code

    @app.errorhandler(SQLAlchemyError)
    @app.errorhandler(Exception)
    def _unexpected(e):
        # depolama hata metni istemciye sızmaz, sadece loglanır
        db.session.rollback()
        app.logger.exception(f"[app] unhandled error: {e}")
        return jsonify({"success": False, "error": "internal", "message": "Internal server error"}), 500


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) Önce db init (db.engine / db.session için şart)
    db.init_app(app)
    with app.app_context():
        configure_sqlite(db.engine)

    # 2) Diğer extension'lar
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app)
    init_docs(app)

    from library_api.utils.auth import register_jwt_callbacks
    register_jwt_callbacks(jwt)

    # 3) Modeller metadata'ya kayıtlı olsun (create_all / migrate için)
    from library_api.models import user, book, borrowing  # noqa: F401

    # 4) API blueprintleri
    from library_api.controllers.user_controller import user_bp
    from library_api.controllers.book_controller import book_bp
    from library_api.controllers.borrowing_controller import borrowing_bp
    app.register_blueprint(user_bp, url_prefix="/users")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrowing_bp, url_prefix="/borrowings")

    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running"})

    from library_api.seed import register_commands
    register_commands(app)

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    return app
