"""Password hashing for seeded credentials, using bcrypt."""

from passlib.context import CryptContext

# Work factor bounds accepted by the bcrypt algorithm
MIN_COST = 4
MAX_COST = 31
DEFAULT_COST = 10


class PasswordHasher:
    """Hash and verify passwords with bcrypt.

    Uses passlib's CryptContext, which generates a fresh salt per hash
    and encodes the cost and salt into the returned string.
    """

    def __init__(self, rounds: int = DEFAULT_COST):
        """Initialize the hasher.

        Args:
            rounds: bcrypt work factor, MIN_COST..MAX_COST

        Raises:
            ValueError: If rounds is outside the valid range
        """
        if rounds < MIN_COST or rounds > MAX_COST:
            raise ValueError(f"bcrypt cost must be between {MIN_COST} and {MAX_COST}")
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password.

        Returns:
            Bcrypt hash string (includes algorithm, rounds, salt, and hash)
        """
        return self._context.hash(password)

    def verify(self, password: str, hash: str) -> bool:
        """Verify a password against a hash.

        Returns:
            True if password matches, False otherwise (including
            when the hash is not a bcrypt hash at all)
        """
        try:
            return self._context.verify(password, hash)
        except ValueError:
            return False
