#!/usr/bin/env python3
"""
Firestore connection for the CMLB functions.
The client is created on first use so importing this module never touches the network.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

# Create logger for this module
logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = 'settings'
NOTIFICATION_SETTINGS_DOC = 'notifications'
DEVICES_COLLECTION = 'fcm_tokens'
RECIPES_COLLECTION = 'recipes'

_db = None


def initialize_firebase_admin():
    """
    Initialize the default Firebase Admin app if it does not exist yet.

    Cloud Functions provides application default credentials. For local runs,
    FIREBASE_SERVICE_ACCOUNT_PATH may point at a service account key file.

    Returns:
        firebase_admin.App: the default app
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    service_account_path = os.environ.get('FIREBASE_SERVICE_ACCOUNT_PATH')
    project_id = os.environ.get('GCP_PROJECT') or os.environ.get('GCLOUD_PROJECT')
    options = {'projectId': project_id} if project_id else None

    if service_account_path and os.path.exists(service_account_path):
        logger.info(f"Initializing Firebase Admin with service account: {service_account_path}")
        return firebase_admin.initialize_app(credentials.Certificate(service_account_path), options)

    logger.info("Initializing Firebase Admin with application default credentials")
    return firebase_admin.initialize_app(options=options)


def get_db():
    """Return the shared Firestore client, creating it on first call"""
    global _db
    if _db is None:
        initialize_firebase_admin()
        _db = firestore.client()
    return _db
