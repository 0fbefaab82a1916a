"""Protected sample resources guarded by user authorities."""

from __future__ import annotations

from authserver.models.token import OAuth2Details
from authserver.services._shared.base import BaseService
from authserver.services._shared.errors import InsufficientAuthorityError

SIMPLE_AUTHORITY = "Simple"
ADMIN_AUTHORITY = "Admin"


class CommonService(BaseService):
    """Resource server payloads for authenticated users."""

    def simple_data(self, username: str) -> str:
        return f"hello {username}, simple data, with simple authority"

    def admin_data(self, username: str) -> str:
        return f"hello {username}, admin data, with admin authority"

    def health_check(self) -> bool:
        return True

    def ensure_authority(self, details: OAuth2Details, authority: str) -> None:
        """
        Ensure the bound user carries ``authority``.

        :raises InsufficientAuthorityError: If the authority is missing.
        """
        if not details.user.has_authority(authority):
            self.log.warning(
                "resource.forbidden",
                extra={"binding": details.key, "authority": authority},
            )
            raise InsufficientAuthorityError(authority)
