from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()


def configure_sqlite(engine):
    """FK enforcement on every SQLite connection. File databases also take
    the write lock at BEGIN so that check-then-write sequences serialise."""
    if engine.dialect.name != "sqlite":
        return
    file_backed = engine.url.database not in (None, "", ":memory:")

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        if file_backed:
            # pysqlite kendi BEGIN'ini atmasın, aşağıda biz atıyoruz
            dbapi_connection.isolation_level = None

    if file_backed:
        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
