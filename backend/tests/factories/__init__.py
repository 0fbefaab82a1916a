"""Factory Boy definitions for client and user directory records."""

from __future__ import annotations

import factory
from authserver.models.client import ClientDetails
from authserver.models.user import UserDetails

DEFAULT_PASSWORD = "123456"


class ClientDetailsFactory(factory.Factory):
    """Build :class:`ClientDetails` records allowed to use both grants."""

    class Meta:
        model = ClientDetails

    client_id = factory.Sequence(lambda n: f"client{n}")
    client_secret = factory.LazyAttribute(lambda o: f"{o.client_id}-secret")
    access_token_validity_seconds = 1800
    refresh_token_validity_seconds = 18000
    registered_redirect_uri = "http://127.0.0.1"
    authorized_grant_types = frozenset({"password", "refresh_token"})


class UserDetailsFactory(factory.Factory):
    """
    Build :class:`UserDetails` records with a hashed password.

    Notes
    -----
    - Pass ``password=...`` to choose the raw password; it is hashed through
      :meth:`UserDetails.create`.
    """

    class Meta:
        model = UserDetails

    username = factory.Sequence(lambda n: f"user{n}")
    password = DEFAULT_PASSWORD
    user_id = factory.Sequence(lambda n: n + 1)
    authorities = frozenset({"Simple"})

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        username = kwargs.pop("username")
        password = kwargs.pop("password")
        return model_class.create(username, password, **kwargs)

    @classmethod
    def _build(cls, model_class, *args, **kwargs):
        return cls._create(model_class, *args, **kwargs)
