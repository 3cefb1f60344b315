from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)


@dataclass
class FirebaseConfig:
    credentials_path: str
    project_id: Optional[str] = None


class FirestoreConnection:
    """Singleton-like Firestore client factory.

    Note: firebase_admin keeps a process-wide default app, so we initialize it
    once and hand out the same client to every repository.
    """

    _instance: Optional["FirestoreConnection"] = None

    def __init__(self, config: FirebaseConfig):
        self._config = config
        self._client = None

    @classmethod
    def get_instance(cls, config: FirebaseConfig) -> "FirestoreConnection":
        if cls._instance is None:
            cls._instance = FirestoreConnection(config)
        return cls._instance

    def _app(self) -> firebase_admin.App:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        options = {"projectId": self._config.project_id} if self._config.project_id else None
        if self._config.credentials_path:
            cred = credentials.Certificate(self._config.credentials_path)
        else:
            # Cloud Functions / Cloud Run provide application default credentials.
            cred = credentials.ApplicationDefault()
        logger.info("Initializing Firebase app (project=%s)", self._config.project_id or "<from credentials>")
        return firebase_admin.initialize_app(cred, options)

    def client(self):
        if self._client is None:
            self._client = firestore.client(self._app())
        return self._client
