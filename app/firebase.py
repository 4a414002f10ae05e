"""
DocStore API — Firebase App Bootstrap
======================================

What:  Credential resolution, Firebase Admin app initialization, and the
       async Firestore client factory.
Who:   FirestoreService.initialize() during application startup.
When:  Once per process; shutdown deletes the app again.

Credential Resolution (first match wins):
    ┌──────────────────────────────┐   exists?   ┌─────────────────────────┐
    │ FIREBASE_SERVICE_ACCOUNT_PATH│────────────▶│ Certificate(file)       │
    └──────────────────────────────┘             └─────────────────────────┘
                 │ no
                 ▼
    ┌──────────────────────────────┐   set?      ┌─────────────────────────┐
    │ FIREBASE_SERVICE_ACCOUNT_KEY │────────────▶│ Certificate(json.loads) │
    └──────────────────────────────┘             └─────────────────────────┘
                 │ no
                 ▼
    ┌──────────────────────────────┐
    │ Application Default Creds    │  (credential=None, SDK resolves it)
    └──────────────────────────────┘
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import AsyncClient

from app.config import Settings, settings
from app.exceptions import CredentialsError

logger = logging.getLogger(__name__)


# ── Credential Strategies ─────────────────────────────────────────────────
SERVICE_ACCOUNT_FILE = "service_account_file"
SERVICE_ACCOUNT_ENV = "service_account_env"
APPLICATION_DEFAULT = "application_default"


def resolve_credential(
    config: Settings = settings,
) -> Tuple[str, Optional[credentials.Base]]:
    """
    Pick the credential the Firebase app is initialized with.

    Returns:
        (strategy, credential) where credential is None for Application
        Default Credentials (firebase_admin.initialize_app resolves those).

    Raises:
        CredentialsError: The selected file or JSON string is not a
            usable service-account key.
    """
    key_path = Path(config.firebase_service_account_path)
    if key_path.is_file():
        try:
            credential = credentials.Certificate(str(key_path))
        except (ValueError, OSError) as e:
            raise CredentialsError(
                message=f"Service-account file '{key_path.name}' is not a valid key",
                source=SERVICE_ACCOUNT_FILE,
                context={"error_type": type(e).__name__},
            ) from e
        return SERVICE_ACCOUNT_FILE, credential

    if config.firebase_service_account_key:
        try:
            key_info = json.loads(config.firebase_service_account_key)
            credential = credentials.Certificate(key_info)
        except ValueError as e:
            raise CredentialsError(
                message="FIREBASE_SERVICE_ACCOUNT_KEY is not a valid service-account JSON",
                source=SERVICE_ACCOUNT_ENV,
                context={"error_type": type(e).__name__},
            ) from e
        return SERVICE_ACCOUNT_ENV, credential

    return APPLICATION_DEFAULT, None


def init_firebase_app(config: Settings = settings) -> Tuple[str, firebase_admin.App]:
    """
    Initialize the default Firebase app unless one already exists.

    Returns:
        (strategy, app). strategy is "existing" when an app was already
        registered in this process and was reused as-is.
    """
    try:
        existing = firebase_admin.get_app()
    except ValueError:
        existing = None

    if existing is not None:
        logger.info("Reusing existing Firebase app '%s'", existing.name)
        return "existing", existing

    strategy, credential = resolve_credential(config)
    options = {}
    if config.firebase_project_id:
        options["projectId"] = config.firebase_project_id

    firebase_app = firebase_admin.initialize_app(credential, options or None)
    logger.info("Firebase app initialized using %s credentials", strategy)
    return strategy, firebase_app


def create_firestore_client(
    firebase_app: Optional[firebase_admin.App] = None,
    config: Settings = settings,
) -> AsyncClient:
    """Async Firestore client bound to the given (or default) Firebase app."""
    if config.firestore_database_id:
        return firestore_async.client(
            app=firebase_app, database_id=config.firestore_database_id
        )
    return firestore_async.client(app=firebase_app)


def close_firebase_app() -> None:
    """
    Delete the default Firebase app, releasing SDK-held resources.

    Safe to call when no app was ever initialized.
    """
    try:
        firebase_app = firebase_admin.get_app()
    except ValueError:
        return
    firebase_admin.delete_app(firebase_app)
    logger.info("Firebase app deleted")
