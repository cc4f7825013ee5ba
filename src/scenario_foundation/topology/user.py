"""User credentials used to log into applications of the topology."""

from typing import Optional

from attr import attrs, attrib

from ..config.settings import UserSettings


def mask_password(password: Optional[str]) -> str:
    if not password:
        return ""
    return password[0] + "*" * (len(password) - 1)


@attrs(frozen=True, repr=False)
class User:
    """
    A user of the applications under test.

    Two users are the same user when their ids match; the other fields are
    informative only. The password never appears in logs: ``repr`` masks
    every character but the first.

    Example:
        >>> User("alice", password="secret")
        User id=alice, name=None, passwd=s*****
    """
    id: str = attrib()
    name: Optional[str] = attrib(default=None, eq=False)
    password: Optional[str] = attrib(default=None, eq=False)
    email: Optional[str] = attrib(default=None, eq=False)

    def __repr__(self) -> str:
        return f"User id={self.id}, name={self.name}, passwd={mask_password(self.password)}"

    __str__ = __repr__

    @classmethod
    def from_settings(cls, settings: UserSettings) -> "User":
        return cls(
            id=settings.id,
            name=settings.name,
            password=settings.password,
            email=settings.email,
        )
