"""Failures raised by the topic service; each carries the HTTP status it renders as."""


class ForumHubError(Exception):
    """Base service exception."""

    status_code = 400
    title = "Erro de negócio"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BusinessRuleError(ForumHubError):
    """Request is well formed but breaks a forum rule (-> HTTP 400)."""


class InstanceNotFoundError(ForumHubError):
    """Topic, course, answer or author not found (-> HTTP 404)."""

    status_code = 404
    title = "Solicitação não encontrada"


class InsufficientPrivilegeError(ForumHubError):
    """Caller is neither the owner nor a moderator/administrator (-> HTTP 418)."""

    status_code = 418
    title = "Privilégio insuficiente"


class OrphanAuthorError(ForumHubError):
    """Topic belongs to an unknown author and cannot be edited (-> HTTP 422)."""

    status_code = 422
    title = "Autor inexistente"


class ServiceUnavailableError(ForumHubError):
    """User service down or answering with an unexpected status (-> HTTP 503)."""

    status_code = 503
    title = "Serviço indisponível"


class UserServiceTimeoutError(ServiceUnavailableError):
    """User service did not answer in time (-> HTTP 503)."""
