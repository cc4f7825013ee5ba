"""
Topology Session Model

The topology is the set of applications under test together with the servers
hosting them. Applications deployed on the same server share one
authentication session: logging into one of them logs the user into all of
its server-mates, and logging out of one logs out of all of them.

The model only records who is believed to be logged in where, so page
objects can decide whether a login page will show up. It never talks to the
applications itself.
"""

import logging
from typing import Dict, Iterable, List, Optional

from attr import attrs, attrib

from ..common.errors import InvalidArgumentError, NoApplicationFoundError
from ..config.settings import ScenarioConfig
from .application import Application
from .user import User

logger = logging.getLogger(__name__)


@attrs(slots=False)
class Topology:
    """
    Applications under test grouped by hosting server.

    Every application belongs to exactly one server group. The server map is
    rebuilt whenever an application is added.

    Attributes:
        applications: Applications of the topology, in declaration order

    Example:
        >>> topology = Topology([
        ...     Application("https://host1:1/app", server="S"),
        ...     Application("https://host1:1/admin", server="S"),
        ... ])
        >>> topology.login("https://host1:1/app/home", User("alice"))
        True
        >>> topology.get_logged_user("https://host1:1/admin")
        User id=alice, name=None, passwd=
    """
    applications: List[Application] = attrib(factory=list)
    _servers: Dict[str, List[Application]] = attrib(init=False, factory=dict)

    def __attrs_post_init__(self):
        declared = list(self.applications)
        self.applications = []
        for application in declared:
            self.add_application(application)

    # region building
    def add_application(self, application: Application) -> Application:
        """
        Add an application and rebuild the server groups.

        Raises:
            InvalidArgumentError: If an application with the same location already exists
        """
        if application in self.applications:
            raise InvalidArgumentError(
                f"Application '{application.location}' is already part of the topology",
                argument="application",
            )
        self.applications.append(application)
        self._rebuild_servers()
        return application

    def _rebuild_servers(self):
        servers: Dict[str, List[Application]] = {}
        for application in self.applications:
            servers.setdefault(application.server, []).append(application)
        self._servers = servers

    @classmethod
    def from_config(cls, config: ScenarioConfig) -> "Topology":
        """Build the topology declared by the run configuration."""
        return cls([
            Application(settings.url, server=settings.server, name=settings.name)
            for settings in config.applications
        ])
    # endregion

    # region lookups
    @property
    def servers(self) -> Dict[str, List[Application]]:
        return {server: list(applications) for server, applications in self._servers.items()}

    def get_application(self, location: str) -> Optional[Application]:
        """
        Return the application owning the given URL, None if there is none.

        When several locations prefix the URL, the most specific one wins.
        """
        candidates = [app for app in self.applications if app.is_application_for(location)]
        if not candidates:
            return None
        return max(candidates, key=lambda app: len(app.location))

    def require_application(self, location: str) -> Application:
        application = self.get_application(location)
        if application is None:
            raise NoApplicationFoundError(location)
        return application

    def server_mates(self, application: Application) -> List[Application]:
        """Applications hosted on the same server, the given one excluded."""
        return [app for app in self._servers.get(application.server, []) if app is not application]

    def on_same_server(self, location: str, other_location: str) -> bool:
        first = self.require_application(location)
        second = self.require_application(other_location)
        return first.server == second.server

    def get_logged_user(self, location: str) -> Optional[User]:
        return self.require_application(location).user
    # endregion

    # region session model
    def login(self, location: str, user: User) -> bool:
        """
        Record a login of the user into the application owning the location.

        The user is propagated to every application of the same server.

        Args:
            location: A URL of the application the user logged into
            user: The logged user

        Returns:
            True if the login state changed, False if the user was already logged in

        Raises:
            NoApplicationFoundError: If no application owns the location
            InvalidArgumentError: If user is None
        """
        application = self.require_application(location)
        changed = application.login(user)
        if changed:
            for mate in self.server_mates(application):
                mate.user = user
            logger.debug(
                f"[Topology.login] {user.id} logged into {application.name} "
                f"and {len(self.server_mates(application))} server-mate(s) on '{application.server}'"
            )
        return changed

    def logout(self, location: str) -> bool:
        """
        Record a logout from the application owning the location.

        Every application of the same server is logged out as well.

        Returns:
            True if the application owning the location had a logged user

        Raises:
            NoApplicationFoundError: If no application owns the location
        """
        application = self.require_application(location)
        changed = application.logout()
        for mate in self.server_mates(application):
            mate.logout()
        if changed:
            logger.debug(f"[Topology.logout] logged out of server '{application.server}'")
        return changed

    def need_login(self, location: str, user: User) -> bool:
        """
        Tell whether the user must log into the application owning the location.

        No login is needed when the application records this user, or when any
        server-mate does (the session is established at server level). In the
        latter case the application record itself is left untouched.

        Raises:
            InvalidArgumentError: If user is None
            NoApplicationFoundError: If no application owns the location
        """
        if user is None:
            raise InvalidArgumentError("Cannot check login need for a null user", argument="user")
        application = self.require_application(location)
        if not application.need_login(user):
            return False
        for mate in self.server_mates(application):
            if mate.user == user:
                logger.debug(
                    f"[Topology.need_login] {user.id} already logged on server "
                    f"'{application.server}' through {mate.name}"
                )
                return False
        return True

    def logout_applications(self, applications: Optional[Iterable[Application]] = None):
        """Log out of the given applications, all of them by default."""
        for application in applications if applications is not None else self.applications:
            application.logout()
    # endregion
