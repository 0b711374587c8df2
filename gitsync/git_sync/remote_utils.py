"""Remote ownership checks for Git synchronization."""

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from ..errors import OwnershipMismatchError
from .operations import GitAdapter


# user@host:path, without a scheme; a single-letter "host" is a Windows drive
_SCP_LIKE = re.compile(r"^(?:[^@/:]+@)?(?P<host>[^/:]{2,}):(?P<path>.*)$")


@dataclass(frozen=True)
class Ownership:
    """Owner inferred from the remote URL and the identity of the operator."""
    remote_owner: str
    operator_identity: str

    @property
    def matches(self) -> bool:
        return self.remote_owner == self.operator_identity


def extract_remote_owner(remote_url: Optional[str]) -> str:
    """
    Owner segment of a remote address: the first path component after the host.

    Works the same for URL form ('https://host/owner/repo.git',
    'ssh://git@host:22/owner/repo') and scp-like form ('git@host:owner/repo').
    Local paths have no host and therefore no owner ('').
    """
    if not remote_url:
        return ""

    remote_url = remote_url.strip()

    if "://" in remote_url:
        path = urlparse(remote_url).path
    else:
        match = _SCP_LIKE.match(remote_url)
        if not match:
            return ""
        path = match.group("path")

    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return ""
    return segments[0]


def extract_email_user(email: Optional[str]) -> str:
    """Local part of an email address ('alice@example.com' -> 'alice')."""
    if not email:
        return ""
    return email.strip().split("@", 1)[0]


class OwnershipGuard:
    """
    Refuses to push automated commits to remotes the operator does not own.

    The remote owner might be a GitHub user or organization, for example. No
    provider-specific logic is applied: every remote is expected to have the
    same owner name.
    """

    def __init__(
        self,
        adapter: GitAdapter,
        allow_nonowner: bool = False,
        logger: Optional[logging.LoggerAdapter] = None,
    ):
        self.adapter = adapter
        self.allow_nonowner = allow_nonowner
        self.logger = logger or logging.getLogger('gitsync.git_sync.remote_utils')

    def operator_identity(self, operator_override: Optional[str] = None) -> str:
        if operator_override:
            return operator_override
        return extract_email_user(self.adapter.config_get("user.email"))

    def verify(self, remote_name: str, operator_override: Optional[str] = None) -> Optional[Ownership]:
        """
        Check that the remote's owner is the operator.

        Returns:
            The verified Ownership, or None when the check is bypassed

        Raises:
            OwnershipMismatchError: owner and operator differ
        """
        if self.allow_nonowner:
            self.logger.debug("Ownership check bypassed")
            return None

        ownership = Ownership(
            remote_owner=extract_remote_owner(self.adapter.remote_get_url(remote_name)),
            operator_identity=self.operator_identity(operator_override),
        )

        if not ownership.matches:
            raise OwnershipMismatchError(remote_name, ownership.remote_owner, ownership.operator_identity)

        self.logger.debug(
            f"Remote ownership verified: '{ownership.operator_identity}' matches '{ownership.remote_owner}'."
        )
        return ownership
