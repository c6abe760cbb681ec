from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from arena.errors import Unauthorized


@dataclass(frozen=True)
class IdentityClaim:
    user_id: int
    username: str


class TokenVerifier:
    """Issues and verifies signed session credentials.

    One instance is shared by the HTTP login flow and the socket handshake,
    so a credential issued by one side is always accepted by the other.
    """

    def __init__(self, secret: str, algorithm: str = 'HS256', ttl: timedelta = timedelta(minutes=60)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: int, username: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'username': username,
            'iat': now,
            'exp': now + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, raw) -> IdentityClaim:
        if not raw or not isinstance(raw, str):
            raise Unauthorized('missing credential')
        try:
            payload = jwt.decode(
                raw,
                self.secret,
                algorithms=[self.algorithm],
                options={'require': ['exp', 'sub']},
            )
        except jwt.ExpiredSignatureError as exc:
            raise Unauthorized('credential expired') from exc
        except jwt.InvalidTokenError as exc:
            raise Unauthorized(f'invalid credential: {exc}') from exc

        username = payload.get('username')
        if not isinstance(username, str) or not username:
            raise Unauthorized('credential has no username')
        try:
            user_id = int(payload['sub'])
        except (TypeError, ValueError) as exc:
            raise Unauthorized('credential subject is not a user id') from exc
        return IdentityClaim(user_id=user_id, username=username)
