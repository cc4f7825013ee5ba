"""
Application Model

An Application is one web application of the topology under test. It is
identified by its location, the URL prefix made of the scheme, the host, the
port and the first path segment (the context root). It records the user
currently logged into it, if any.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from attr import attrs, attrib

from ..common.errors import InvalidArgumentError
from .user import User

logger = logging.getLogger(__name__)

# Characters that may follow a location in a URL it owns
_LOCATION_BOUNDARIES = ('/', '?', '#')


@attrs(eq=False, repr=False, slots=False)
class Application:
    """
    A deployed web application and its login state.

    Attributes:
        url: The URL the application was declared with
        server: Address of the hosting server; applications sharing it share sessions.
                Defaults to the URL authority (host and port).
        name: Human readable name; defaults to the context root or the host
        location: scheme://host:port/<context root>, the identity of the application
        context_root: First path segment of the URL, empty when the URL has no path
        user: The user currently logged in, None when logged out

    Example:
        >>> app = Application("https://host1:9443/app/home")
        >>> app.location, app.server, app.context_root
        ('https://host1:9443/app', 'host1:9443', 'app')
        >>> app.is_application_for("https://HOST1:9443/app/page?id=3")
        True
    """
    url: str = attrib()
    server: Optional[str] = attrib(default=None)
    name: Optional[str] = attrib(default=None)
    location: str = attrib(init=False)
    context_root: str = attrib(init=False)
    user: Optional[User] = attrib(default=None, init=False)

    def __attrs_post_init__(self):
        parts = urlsplit(self.url)
        if not parts.scheme or not parts.netloc:
            raise InvalidArgumentError(
                f"Application URL '{self.url}' must be absolute (scheme and host)",
                argument="url",
            )
        segments = [segment for segment in parts.path.split('/') if segment]
        if len(segments) > 1:
            logger.info(
                f"Application URL '{self.url}' has a multi-segment path, "
                f"only '{segments[0]}' is used as context root"
            )
        self.context_root = segments[0] if segments else ''
        base = f"{parts.scheme}://{parts.netloc}"
        self.location = f"{base}/{self.context_root}" if self.context_root else base
        if self.server is None:
            self.server = parts.netloc
        if self.name is None:
            self.name = self.context_root or parts.hostname or parts.netloc

    def __eq__(self, other):
        if not isinstance(other, Application):
            return NotImplemented
        return self.location == other.location

    def __hash__(self):
        return hash(self.location)

    def __repr__(self):
        return f"Application(name={self.name!r}, location={self.location!r}, server={self.server!r})"

    def is_application_for(self, url: str) -> bool:
        """Return whether the given URL belongs to this application (case-insensitive)."""
        url_lower = url.lower()
        location_lower = self.location.lower()
        if not url_lower.startswith(location_lower):
            return False
        rest = url_lower[len(location_lower):]
        return not rest or rest.startswith(_LOCATION_BOUNDARIES)

    def login(self, user: User) -> bool:
        """
        Record the given user as logged in.

        Returns:
            False if this user was already logged in, True otherwise

        Raises:
            InvalidArgumentError: If user is None
        """
        if user is None:
            raise InvalidArgumentError("Cannot login with a null user", argument="user")
        if user == self.user:
            return False
        self.user = user
        return True

    def logout(self) -> bool:
        """Clear the logged user; returns whether a user was logged in."""
        if self.user is None:
            return False
        self.user = None
        return True

    def need_login(self, user: User) -> bool:
        return self.user is None or self.user != user
