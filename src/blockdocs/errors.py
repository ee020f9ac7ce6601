class DocsError(Exception):
    """Base class for every failure raised by blockdocs operations."""


class AuthorizationError(DocsError):
    """No signed-in user, or the signed-in user does not own the resource."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(DocsError):
    """The target entity does not exist."""

    def __init__(self, kind: str, id: object):
        self.kind = kind
        self.id = id
        super().__init__(f"{kind} not found: {id}")


class ValidationError(DocsError):
    """Input rejected before anything was written."""


class NestingDepthError(ValidationError):
    """A header may only be nested under a top-level header."""


class PersistenceError(DocsError):
    """The backing store failed while saving."""
