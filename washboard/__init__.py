from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS') or [])

    # Explicit store handle for the ledger; closed by whoever owns the process
    from washboard.store import Store
    from washboard.services import build_services
    with flask_app.app_context():
        store = Store(db.engine).open()
    flask_app.extensions['washboard'] = build_services(
        store,
        session_ttl_sec=int(flask_app.config.get('SESSION_TTL_SEC', 600)),
    )

    # Import and register blueprints here
    from washboard.routes import main
    flask_app.register_blueprint(main)

    from washboard.api.kiosk import kiosk
    flask_app.register_blueprint(kiosk, url_prefix='/api')

    from washboard.errors import LedgerError, StorageUnavailable

    def handle_ledger_error(exc):
        if isinstance(exc, StorageUnavailable):
            flask_app.logger.error(f"[storage] request failed: {exc.__cause__!r}")
        return jsonify(exc.to_dict()), exc.status

    flask_app.register_error_handler(LedgerError, handle_ledger_error)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the session and score tables."""
        import washboard.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def get_services(flask_app):
    return flask_app.extensions['washboard']
