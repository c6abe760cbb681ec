import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess-change-me-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///arena.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Session credentials (shared by HTTP login and the socket handshake)
    TOKEN_ALGORITHM = os.environ.get('TOKEN_ALGORITHM', 'HS256')
    TOKEN_TTL_MINUTES = int(os.environ.get('TOKEN_TTL_MINUTES', '60'))
    TOKEN_COOKIE_NAME = os.environ.get('TOKEN_COOKIE_NAME', 'token')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Playfield bounds; every broadcast position is clamped into [0, W] x [0, H]
    PLAYFIELD_WIDTH = float(os.environ.get('PLAYFIELD_WIDTH', '800'))
    PLAYFIELD_HEIGHT = float(os.environ.get('PLAYFIELD_HEIGHT', '600'))
    SPAWN_X = float(os.environ.get('SPAWN_X', '400'))
    SPAWN_Y = float(os.environ.get('SPAWN_Y', '300'))
    MAX_HP = int(os.environ.get('MAX_HP', '100'))
    # Registration rules
    USERNAME_MIN_LENGTH = int(os.environ.get('USERNAME_MIN_LENGTH', '3'))
    USERNAME_MAX_LENGTH = int(os.environ.get('USERNAME_MAX_LENGTH', '32'))
    PASSWORD_MIN_LENGTH = int(os.environ.get('PASSWORD_MIN_LENGTH', '6'))
