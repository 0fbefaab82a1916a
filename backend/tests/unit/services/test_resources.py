"""Unit tests for CommonService."""

from __future__ import annotations

import pytest
from authserver.models.token import OAuth2Details
from authserver.services._shared.errors import InsufficientAuthorityError
from authserver.services.resources.service import ADMIN_AUTHORITY, SIMPLE_AUTHORITY, CommonService

from tests.factories import UserDetailsFactory


@pytest.fixture()
def service() -> CommonService:
    return CommonService()


def test_payloads(service):
    assert service.simple_data("simple") == "hello simple, simple data, with simple authority"
    assert service.admin_data("admin") == "hello admin, admin data, with admin authority"
    assert service.health_check() is True


def test_ensure_authority(service, oauth_client):
    admin = OAuth2Details(client=oauth_client, user=UserDetailsFactory(authorities={ADMIN_AUTHORITY}))
    simple = OAuth2Details(client=oauth_client, user=UserDetailsFactory(authorities={SIMPLE_AUTHORITY}))

    service.ensure_authority(admin, ADMIN_AUTHORITY)
    with pytest.raises(InsufficientAuthorityError):
        service.ensure_authority(simple, ADMIN_AUTHORITY)
