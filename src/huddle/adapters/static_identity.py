"""Fixed identity adapter - the acting user comes from config or the command line."""


class StaticIdentity:
    """
    Identity fixed at construction.

    Implements IdentityProvider protocol. An empty user id means signed out.
    """

    def __init__(self, user_id: str | None = None):
        self.user_id = user_id or None

    def current_user_id(self) -> str | None:
        return self.user_id
