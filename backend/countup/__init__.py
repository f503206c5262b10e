from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import InternalServerError
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SAMPLE_COUNTDOWNS = [
    ('pushups', 10),
    ('pages read', 300),
    ('glasses of water', 8),
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from countup.main import main
    flask_app.register_blueprint(main)

    from countup.api.countdowns import countdowns
    flask_app.register_blueprint(countdowns, url_prefix='/count')

    from countup.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from countup.errors import CountupError

    @flask_app.errorhandler(CountupError)
    def handle_countup_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc}")
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(InternalServerError)
    def handle_internal_error(exc):
        # Flask has already logged the original exception at this point
        return jsonify({'error': 'Internal server error'}), 500

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from countup.store import CountdownStore
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            store = CountdownStore(db.session)
            for name, target in SAMPLE_COUNTDOWNS:
                store.create(name, target)
            click.echo('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
