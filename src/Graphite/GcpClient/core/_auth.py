# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass

import google.auth.transport.requests
from google.auth.credentials import Credentials


@dataclass
class _TokenPair:
    scheme: str
    access_token: str


class _AuthManager:
    """google-auth based credential holder used by the client factory and registry calls."""

    def __init__(self, credentials: Credentials) -> None:
        if not isinstance(credentials, Credentials):
            raise TypeError("credentials must implement google.auth.credentials.Credentials.")
        self.credentials: Credentials = credentials

    def _acquire_token(self) -> _TokenPair:
        """Return a bearer token, refreshing the credentials when they are not valid."""
        if not self.credentials.valid:
            self.credentials.refresh(google.auth.transport.requests.Request())
        return _TokenPair(scheme="Bearer", access_token=self.credentials.token)
