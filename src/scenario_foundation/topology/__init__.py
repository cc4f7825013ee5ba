"""
Topology session model: applications, the servers hosting them and the users
logged into them.

Example usage:
    from scenario_foundation.topology import Application, Topology, User

    topology = Topology([
        Application("https://host1:9443/app", server="S1"),
        Application("https://host1:9443/admin", server="S1"),
    ])
    if topology.need_login("https://host1:9443/app/home", alice):
        ...  # drive the login page
        topology.login("https://host1:9443/app/home", alice)
"""

from .application import Application
from .topology import Topology
from .user import User, mask_password

__all__ = [
    'Application',
    'Topology',
    'User',
    'mask_password',
]
