from datetime import datetime, timezone

from arena import db, bcrypt
from flask_login import UserMixin


def _utcnow():
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    results = db.relationship('GameResult', back_populates='user', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not password:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }

    def stats(self):
        results = self.results.all()
        return {
            'games_played': len(results),
            'wins': sum(1 for r in results if r.won),
            'best_score': max((r.score for r in results), default=0),
        }


class GameResult(db.Model):
    """Outcome of one finished game, reported by the client at game end."""
    __tablename__ = 'game_result'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    won = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    user = db.relationship('User', back_populates='results')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'score': self.score,
            'won': self.won,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
