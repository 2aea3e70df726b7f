"""Who is signed in, and which medium their data lives in.

Authentication itself happens upstream; by the time a request reaches us the
principal's uid and verified email are known. The only decision made here is
whether that principal is the single privileged (cloud-backed) account.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from impactlog.core.config import settings


@dataclass(frozen=True)
class Principal:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class AccessLevel(str, Enum):
    unauthenticated = "unauthenticated"
    privileged = "privileged"
    standard = "standard"


class AccessPolicy:
    """Allow-list of exactly one email address, compared case-sensitively."""

    def __init__(self, privileged_email: Optional[str]):
        self.privileged_email = privileged_email

    def resolve(self, principal: Optional[Principal]) -> AccessLevel:
        if principal is None:
            return AccessLevel.unauthenticated
        if self.privileged_email and principal.email == self.privileged_email:
            return AccessLevel.privileged
        return AccessLevel.standard

    def is_privileged(self, principal: Optional[Principal]) -> bool:
        return self.resolve(principal) is AccessLevel.privileged


def get_access_policy() -> AccessPolicy:
    return AccessPolicy(settings.privileged_email)
