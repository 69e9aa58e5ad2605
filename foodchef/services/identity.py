"""
Identity Provider
Verifies Firebase ID tokens presented as bearer tokens
"""
import json
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials
from fastapi.concurrency import run_in_threadpool

from foodchef.config import get_settings

logger = logging.getLogger(__name__)


class TokenVerificationError(Exception):
    """Raised when a bearer token cannot be verified"""


class FirebaseIdentityProvider:
    """
    Thin wrapper around firebase-admin token verification.

    Credentials come from a service account JSON file or from the same JSON
    passed inline. The Firebase app is initialised on first use so the
    service can start without credentials when no protected route is hit.
    """

    APP_NAME = "foodchef"

    def __init__(self, credentials_file: Optional[str] = None, credentials_json: Optional[str] = None):
        self.credentials_file = credentials_file
        self.credentials_json = credentials_json
        self._app: Optional[firebase_admin.App] = None

    def _load_credentials(self) -> credentials.Certificate:
        if self.credentials_json:
            return credentials.Certificate(json.loads(self.credentials_json))
        if self.credentials_file:
            return credentials.Certificate(self.credentials_file)
        raise TokenVerificationError("Firebase credentials are not configured")

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.APP_NAME)
            except ValueError:
                self._app = firebase_admin.initialize_app(self._load_credentials(), name=self.APP_NAME)
                logger.info("Firebase admin app initialised")
        return self._app

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Decode and verify an ID token, returning its claims"""
        app = self._get_app()
        try:
            return await run_in_threadpool(auth.verify_id_token, token, app=app)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
            raise TokenVerificationError(str(e)) from e


@lru_cache()
def get_identity_provider() -> FirebaseIdentityProvider:
    settings = get_settings()
    return FirebaseIdentityProvider(
        credentials_file=settings.FIREBASE_CREDENTIALS_FILE,
        credentials_json=settings.FIREBASE_CREDENTIALS_JSON,
    )
