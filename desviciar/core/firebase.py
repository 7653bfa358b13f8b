"""Firebase Admin SDK context (Auth, Firestore, Cloud Messaging)"""
import json
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore, messaging

from desviciar.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class FirebaseNotConfiguredError(RuntimeError):
    """Raised when no service account credentials are available"""


class FirebaseContext:
    """
    Owns the Firebase Admin app and hands out the clients built on it.

    Initialization is lazy and idempotent: the app is created on first use,
    and an already-registered default app is reused instead of initialized
    twice. Services receive this object through their constructors rather than
    reaching for module-level singletons.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._firebase_app = None
        self._db = None
        self._auth = None

    def _load_credentials(self):
        raw = self.settings.FIREBASE_SERVICE_ACCOUNT
        if raw:
            # Private keys pasted into env vars usually carry escaped newlines
            service_account = json.loads(raw.replace("\\n", "\n"))
            return credentials.Certificate(service_account)

        if os.path.exists(self.settings.FIREBASE_CREDENTIALS_PATH):
            return credentials.Certificate(self.settings.FIREBASE_CREDENTIALS_PATH)

        raise FirebaseNotConfiguredError(
            "Firebase credentials not found: set FIREBASE_SERVICE_ACCOUNT "
            f"or provide {self.settings.FIREBASE_CREDENTIALS_PATH}"
        )

    @property
    def app(self):
        """Initialize Firebase Admin SDK (lazy loading)"""
        if self._firebase_app is None:
            try:
                self._firebase_app = firebase_admin.get_app()
            except ValueError:
                cred = self._load_credentials()
                options = {}
                if self.settings.FIREBASE_PROJECT_ID:
                    options["projectId"] = self.settings.FIREBASE_PROJECT_ID
                self._firebase_app = firebase_admin.initialize_app(cred, options or None)
                logger.info("Firebase Admin SDK initialized successfully")
        return self._firebase_app

    @property
    def db(self):
        """Firestore client"""
        if self._db is None:
            self._db = firestore.client(app=self.app)
        return self._db

    @property
    def auth(self) -> auth.Client:
        """Firebase Auth client"""
        if self._auth is None:
            self._auth = auth.Client(self.app)
        return self._auth

    def send_message(self, message: messaging.Message) -> str:
        """Send a single FCM message, returns the message id"""
        return messaging.send(message, app=self.app)


_context: Optional[FirebaseContext] = None


def get_firebase() -> FirebaseContext:
    """FastAPI dependency returning the process-wide Firebase context"""
    global _context
    if _context is None:
        _context = FirebaseContext()
    return _context
