# Area: Scrim
"""
scrim_manager._scrim.roles — Role Providers
===========================================

Resolves an email to a Role for permission checks. The coordinator
only asks ``role_of``; where roles come from is up to the provider.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from .enums import Role
from .repo_users import UserRepository

logger = logging.getLogger("scrim_manager.scrim.roles")


class RoleProvider(ABC):
    """Abstract identity/role provider."""

    @abstractmethod
    def role_of(self, email: str) -> Role:
        """
        Resolve a user's role.

        Args:
            email: User identity

        Returns:
            The user's Role (MEMBER for unknown users)
        """
        pass

    def is_admin(self, email: str) -> bool:
        return self.role_of(email).is_admin


class UserRoleProvider(RoleProvider):
    """
    Reads roles from profiles in the users collection.

    Emails listed in ``admin_emails`` are admins regardless of their
    profile, so a fresh install has someone who can manage scrims.
    """

    def __init__(self, users: UserRepository, admin_emails: Optional[Iterable[str]] = None):
        self.users = users
        self.admin_emails = {e.strip().lower() for e in admin_emails or [] if e.strip()}

    def role_of(self, email: str) -> Role:
        if email.lower() in self.admin_emails:
            return Role.ADMIN
        profile = self.users.get_user(email)
        if profile is None:
            logger.debug(f"No profile for {email}; treating as member")
            return Role.MEMBER
        return Role.from_label(profile.get("role", Role.MEMBER.value))


class StaticRoleProvider(RoleProvider):
    """Fixed email -> role mapping."""

    def __init__(self, roles: Optional[Dict[str, Role]] = None):
        self.roles = dict(roles or {})

    def role_of(self, email: str) -> Role:
        return self.roles.get(email, Role.MEMBER)
