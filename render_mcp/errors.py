"""
Error taxonomy shared by the session layer, the API client and tool handlers.

Each class maps to one user-facing failure mode so handlers can tell them
apart:

- NoWorkspaceError: no workspace selected yet (user-actionable)
- NotAuthenticatedError: no API token available (user-actionable)
- BackendUnavailableError: session store or network unreachable
- APIError: the Render API rejected the request (Unauthorized, Forbidden, other)
- DatabaseQueryError: a query against a Render-hosted database failed
"""

from typing import Optional


class RenderMCPError(Exception):
    """Base class for all errors raised by render_mcp."""


class NoWorkspaceError(RenderMCPError):
    """No workspace has been selected for the current session."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "no workspace set. Use the list_workspaces tool to see the available "
            "workspaces, then ask the user which one to use and call select_workspace. "
            "Do not pick a workspace on the user's behalf."
        )


class NotAuthenticatedError(RenderMCPError):
    """No API token is available for outbound requests."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "not authenticated. Set the RENDER_API_KEY environment variable to a "
            "Render API key, or send one as a Bearer token in the Authorization header."
        )


class ConfigError(RenderMCPError):
    """The on-disk configuration could not be read or written."""


class BackendUnavailableError(RenderMCPError):
    """A backing service (session store, Render API) could not be reached."""


class SessionStoreError(BackendUnavailableError):
    """The session store failed a round trip."""


class SessionUnavailableError(BackendUnavailableError):
    """No session is bound to the current call."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "session storage is unavailable, so workspace selection is disabled "
            "for this call. Retry shortly; if the problem persists, check the "
            "server's REDIS_URL."
        )


class APIError(RenderMCPError):
    """The Render API answered with an error status."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class UnauthorizedError(APIError):
    def __init__(self):
        super().__init__("unauthorized", status_code=401)


class ForbiddenError(APIError):
    def __init__(self):
        super().__init__("forbidden", status_code=403)


class WorkspaceMismatchError(RenderMCPError):
    """A resource belongs to a workspace other than the selected one."""

    def __init__(self, selected: str, resource_workspace: str):
        super().__init__(
            f"resource in workspace does not match the workspace in the current "
            f"workspace context {selected}. You can use the `select_workspace` tool to "
            f"change contexts to {resource_workspace}, but you should only do this "
            f"after asking the user to confirm"
        )
        self.selected = selected
        self.resource_workspace = resource_workspace


class DatabaseQueryError(RenderMCPError):
    """A query against a Render-hosted database failed."""
