from datetime import timedelta

from flask import Flask, current_app, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Realtime session: one verifier shared by HTTP and the socket handshake,
    # and a fresh, empty registry per app
    from arena.services.session import SESSION_EXTENSION, TOKENS_EXTENSION
    from arena.services.session.lifecycle import SessionLifecycle
    from arena.services.session.protocol import Playfield, SocketIOBroadcaster
    from arena.services.session.registry import PlayerRegistry
    from arena.services.session.tokens import TokenVerifier

    cfg = flask_app.config
    tokens = TokenVerifier(
        cfg['SECRET_KEY'],
        algorithm=cfg.get('TOKEN_ALGORITHM', 'HS256'),
        ttl=timedelta(minutes=int(cfg.get('TOKEN_TTL_MINUTES', 60))),
    )
    namespace = cfg.get('SOCKETIO_NAMESPACE', '/ws')
    session = SessionLifecycle(
        registry=PlayerRegistry(),
        broadcaster=SocketIOBroadcaster(socketio, namespace=namespace),
        verifier=tokens,
        playfield=Playfield(float(cfg.get('PLAYFIELD_WIDTH', 800)), float(cfg.get('PLAYFIELD_HEIGHT', 600))),
        spawn=(float(cfg.get('SPAWN_X', 400)), float(cfg.get('SPAWN_Y', 300))),
        max_hp=int(cfg.get('MAX_HP', 100)),
        logger=flask_app.logger,
    )
    flask_app.extensions[TOKENS_EXTENSION] = tokens
    flask_app.extensions[SESSION_EXTENSION] = session

    # Import and register blueprints here
    from arena.main import main
    flask_app.register_blueprint(main)

    from arena.api.results import results
    flask_app.register_blueprint(results, url_prefix='/api')

    from arena.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    # Register Socket.IO event handlers on the initialized socketio instance
    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    # Flask-Login: the signed session cookie (or a bearer header) is the login
    from arena.models import User
    from arena.errors import Unauthorized
    from arena.services.session import current_tokens

    @login_manager.user_loader
    def load_user(user_id):
        return User.query.filter_by(id=int(user_id)).first()

    @login_manager.request_loader
    def load_user_from_request(req):
        raw = req.cookies.get(current_app.config.get('TOKEN_COOKIE_NAME', 'token'))
        header = req.headers.get('Authorization', '')
        if not raw and header.startswith('Bearer '):
            raw = header[len('Bearer '):]
        if not raw:
            return None
        try:
            claim = current_tokens().verify(raw)
        except Unauthorized as exc:
            current_app.logger.info(f"[auth] rejected credential path={req.path} reason={exc}")
            return None
        return User.query.filter_by(id=claim.user_id).first()

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "error": "Authentication required"}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
