import os

import firebase_admin
from firebase_admin import auth, credentials

import config
from utils.logger import setup_api_logger

logger = setup_api_logger()

# Firebase Admin is initialised lazily, once
_initialized = False


class FirebaseNotConfigured(RuntimeError):
    pass


class InvalidIdToken(ValueError):
    pass


def initialize_firebase_admin() -> bool:
    """Initialise the Firebase Admin SDK from a service account or ADC."""
    global _initialized
    if _initialized:
        return True

    try:
        firebase_admin.get_app()
        _initialized = True
        return True
    except ValueError:
        pass

    try:
        if os.path.exists(config.FIREBASE_CREDENTIALS_PATH):
            cred = credentials.Certificate(config.FIREBASE_CREDENTIALS_PATH)
            firebase_admin.initialize_app(cred)
            _initialized = True
            logger.info("Firebase Admin initialised with %s", config.FIREBASE_CREDENTIALS_PATH)
        elif os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
            firebase_admin.initialize_app()
            _initialized = True
            logger.info("Firebase Admin initialised from GOOGLE_APPLICATION_CREDENTIALS")
        else:
            logger.warning("Firebase credentials not found at %s; Google sign-in is disabled",
                           config.FIREBASE_CREDENTIALS_PATH)
    except (ValueError, OSError) as exc:
        logger.error("Error initialising Firebase Admin: %s", exc)
        _initialized = False

    return _initialized


def verify_id_token(id_token: str) -> dict:
    """Verify a Firebase/Google ID token and return its decoded claims."""
    if not initialize_firebase_admin():
        raise FirebaseNotConfigured("Firebase Admin is not configured")

    try:
        return auth.verify_id_token(id_token)
    except auth.CertificateFetchError as exc:
        raise FirebaseNotConfigured(str(exc))
    except (ValueError, auth.InvalidIdTokenError, auth.UserDisabledError) as exc:
        raise InvalidIdToken(str(exc))
