"""Domain value objects: the authenticated principal seen by the checker."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Principal:
    """Identity facts the checker needs: holder id, role ids, authentication status.

    role_ids order is kept; it decides the order in which role grants are read.
    """

    user_id: str | None
    role_ids: tuple[str, ...] = field(default_factory=tuple)
    client_id: str | None = None
    is_authenticated: bool = True

    @classmethod
    def anonymous(cls) -> "Principal":
        """Return an unauthenticated principal."""
        return cls(user_id=None, is_authenticated=False)
