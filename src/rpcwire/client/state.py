"""Per-client configuration state: endpoint, headers, auth and id policy."""

import base64

from rpcwire.protocol.ids import IDAllocator

CONTENT_TYPE = "application/json"


def basic_auth_header(username: str, password: str) -> str | None:
    """Format an HTTP basic-auth header value.

    Returns:
        ``"Basic <base64(user:pass)>"``, or None if either part is empty
    """
    if not username or not password:
        return None
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


class ClientState:
    """Mutable settings shared by every request one client sends.

    Changes apply to all requests built afterwards. Only the id counter
    (inside ``allocator``) is lock-protected; header and auth changes while
    calls are in flight are the caller's responsibility.
    """

    def __init__(self, endpoint: str, allocator: IDAllocator | None = None):
        """Initialize state.

        Args:
            endpoint: JSON-RPC endpoint URL
            allocator: Id allocator (defaults to a new one starting at 0)
        """
        self.endpoint = endpoint
        self.allocator = allocator or IDAllocator()
        self.custom_headers: dict[str, str] = {}
        self.basic_auth: str | None = None

    def set_custom_header(self, name: str, value: str) -> None:
        """Add or overwrite a header sent with every request."""
        self.custom_headers[name] = value

    def set_basic_auth(self, username: str, password: str) -> None:
        """Set basic-auth credentials; an empty username or password clears them."""
        self.basic_auth = basic_auth_header(username, password)

    def set_auto_increment(self, flag: bool) -> None:
        """Enable or disable id auto-increment."""
        self.allocator.set_auto_increment(flag)

    def set_next_id(self, value: int) -> None:
        """Set the id used by the next request."""
        self.allocator.set_next_id(value)

    def outbound_headers(self) -> dict[str, str]:
        """Headers for one POST: custom headers, then auth, then content negotiation."""
        headers = dict(self.custom_headers)
        if self.basic_auth:
            headers["Authorization"] = self.basic_auth
        headers["Content-Type"] = CONTENT_TYPE
        headers["Accept"] = CONTENT_TYPE
        return headers
