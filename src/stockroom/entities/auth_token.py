"""Session token domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthToken:
    """A freshly issued session.

    Attributes:
        auth_id: Id of the authenticated user (sent back as the auth-id header)
        auth_token: Opaque session token (sent back as the auth-token header)
    """

    auth_id: str
    auth_token: str
