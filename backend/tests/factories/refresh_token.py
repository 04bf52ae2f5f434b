"""Factory Boy definition for :class:`cleo.models.refresh_token.RefreshToken`."""

from __future__ import annotations

from datetime import timedelta

import factory

from cleo.models.base import utcnow
from cleo.models.refresh_token import RefreshToken
from cleo.services._shared.ports import new_refresh_token
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class RefreshTokenFactory(BaseFactory):
    """Build persisted refresh tokens; active for 30 days unless overridden."""

    class Meta:
        model = RefreshToken

    token = factory.LazyFunction(new_refresh_token)
    user = factory.SubFactory(UserFactory)
    created_at = factory.LazyFunction(utcnow)
    expires_at = factory.LazyAttribute(lambda o: o.created_at + timedelta(days=30))
    revoked_at = None
