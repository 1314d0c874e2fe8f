"""
Firebase service for Authentication, Firestore and Storage operations
"""

from __future__ import annotations
import asyncio
import json
import logging
import os
import uuid
from typing import Optional, Dict, Any, List, Tuple
from urllib.parse import quote

import firebase_admin
import httpx
from firebase_admin import credentials, firestore, storage, auth as firebase_auth

from vspress.config import settings


logger = logging.getLogger(__name__)

DOWNLOAD_TOKENS_KEY = "firebaseStorageDownloadTokens"


class CollaboratorError(Exception):
    """A Firebase call failed. The message is the collaborator's own text."""


class FirebaseService:
    """Service for Firebase operations"""

    _instance = None
    _initialized = False

    def __new__(cls):
        """Singleton pattern to ensure only one Firebase instance"""
        if cls._instance is None:
            cls._instance = super(FirebaseService, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "_db"):
            self._db = None

    @property
    def db(self):
        """Firestore client, created on first use"""
        if self._db is None:
            self._ensure_app()
            self._db = firestore.client()
        return self._db

    def _ensure_app(self):
        if not FirebaseService._initialized:
            self._initialize_firebase()
            FirebaseService._initialized = True

    def _initialize_firebase(self):
        """Initialize Firebase Admin SDK with credentials"""
        try:
            # Check if already initialized
            firebase_admin.get_app()
            logger.info("Firebase already initialized")
            return
        except ValueError:
            pass

        options = {"storageBucket": settings.FIREBASE_STORAGE_BUCKET}
        if settings.FIREBASE_PROJECT_ID:
            options["projectId"] = settings.FIREBASE_PROJECT_ID

        if settings.DEV_MODE and settings.FIREBASE_EMULATOR_HOST:
            # Use emulator for development
            os.environ["FIRESTORE_EMULATOR_HOST"] = settings.FIREBASE_EMULATOR_HOST
            firebase_admin.initialize_app(options=options)
            logger.info("Firebase initialized with emulator: %s",
                        settings.FIREBASE_EMULATOR_HOST)
            return

        if settings.FIREBASE_CREDENTIALS_JSON:
            try:
                cred = credentials.Certificate(
                    json.loads(settings.FIREBASE_CREDENTIALS_JSON))
            except json.JSONDecodeError as e:
                logger.error("Error parsing FIREBASE_CREDENTIALS_JSON: %s", e)
                raise
            logger.info(
                "Firebase initialized with credentials from FIREBASE_CREDENTIALS_JSON")
        else:
            # Fallback to file path
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
            logger.info("Firebase initialized with credentials from %s",
                        settings.FIREBASE_CREDENTIALS_PATH)

        firebase_admin.initialize_app(cred, options)

    async def _call(self, operation: str, fn, *args, **kwargs):
        """
        Run a blocking SDK call off the event loop, normalising its failure

        ``fn`` must do all SDK work itself, including app initialisation and
        building document references, so that argument errors (e.g. an id
        containing ``/``) surface as CollaboratorError too.
        """
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except CollaboratorError:
            raise
        except Exception as e:
            logger.warning("Firebase %s failed: %s", operation, e)
            raise CollaboratorError(str(e)) from e

    def _document(self, collection: str, doc_id: Optional[str] = None):
        ref = self.db.collection(collection)
        return ref.document(doc_id) if doc_id is not None else ref.document()

    # ============================================
    # IDENTITY
    # ============================================

    async def create_account(self, email: str, password: str) -> str:
        """Create an email/password account and return its UID"""

        def _create():
            self._ensure_app()
            return firebase_auth.create_user(email=email, password=password).uid

        return await self._call("create_account", _create)

    async def authenticate(self, email: str, password: str) -> str:
        """
        Exchange email and password for a session via the Identity Toolkit
        REST API. The Admin SDK cannot check passwords itself.

        Returns:
            The UID of the authenticated account
        """
        if not settings.FIREBASE_API_KEY:
            raise CollaboratorError("Firebase API key not configured")

        url = f"{settings.IDENTITY_TOOLKIT_URL}/accounts:signInWithPassword"
        payload = {"email": email, "password": password,
                   "returnSecureToken": True}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url, params={"key": settings.FIREBASE_API_KEY}, json=payload
                )
        except httpx.HTTPError as e:
            logger.warning("Firebase authenticate failed: %s", e)
            raise CollaboratorError(str(e)) from e

        if response.status_code != 200:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = None
            raise CollaboratorError(message or f"HTTP {response.status_code}")

        return response.json()["localId"]

    async def sign_out(self, uid: str) -> None:
        """Terminate all sessions of the account"""

        def _revoke():
            self._ensure_app()
            firebase_auth.revoke_refresh_tokens(uid)

        await self._call("sign_out", _revoke)

    async def update_display_name(self, uid: str, display_name: str) -> None:
        def _update():
            self._ensure_app()
            firebase_auth.update_user(uid, display_name=display_name)

        await self._call("update_display_name", _update)

    # ============================================
    # DOCUMENTS
    # ============================================

    async def list_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        filters: Optional[List[tuple]] = None,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """
        Query a collection (or a sub-collection path such as
        ``articles/{id}/comments``).

        Args:
            collection: Collection path
            order_by: Field to order by
            descending: Order direction
            limit: Maximum number of documents to return
            filters: List of (field, op, value) tuples

        Returns:
            List of (document_id, document_data) tuples
        """
        for f in filters or []:
            if len(f) != 3:
                raise ValueError(
                    f"Invalid filter format: {f}. Expected (field, op, value)")

        def _get_stream_data():
            query = self.db.collection(collection)
            for field, op, value in filters or []:
                query = query.where(field, op, value)
            if order_by:
                direction = (
                    firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
                )
                query = query.order_by(order_by, direction=direction)
            if limit:
                query = query.limit(limit)
            return [(doc.id, doc.to_dict()) for doc in query.stream()]

        return await self._call("list_documents", _get_stream_data)

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._call(
            "get_document", lambda: self._document(collection, doc_id).get()
        )
        if not doc.exists:
            return None
        return doc.to_dict()

    async def create_document(self, collection: str, data: Dict[str, Any]) -> str:
        """Add a document with a generated ID and return the ID"""

        def _create():
            doc_ref = self._document(collection)
            doc_ref.set(data)
            return doc_ref.id

        return await self._call("create_document", _create)

    async def set_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await self._call(
            "set_document", lambda: self._document(collection, doc_id).set(data)
        )

    async def update_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """
        Partially update a document. Values may be Firestore transforms
        (``firestore.Increment``, ``firestore.ArrayUnion``,
        ``firestore.ArrayRemove``, ``firestore.SERVER_TIMESTAMP``); all
        fields of one call are applied atomically.
        """
        await self._call(
            "update_document", lambda: self._document(collection, doc_id).update(data)
        )

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await self._call(
            "delete_document", lambda: self._document(collection, doc_id).delete()
        )

    # ============================================
    # STORAGE
    # ============================================

    def _bucket(self):
        self._ensure_app()
        return storage.bucket(settings.FIREBASE_STORAGE_BUCKET or None)

    async def upload_blob(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes to Firebase Storage and return the object path"""

        def _upload():
            blob = self._bucket().blob(path)
            # Same token scheme the Firebase client SDKs use for download URLs
            blob.metadata = {DOWNLOAD_TOKENS_KEY: str(uuid.uuid4())}
            blob.upload_from_string(content, content_type=content_type)
            return path

        return await self._call("upload_blob", _upload)

    async def resolve_blob(self, path: str) -> str:
        """Return a durable download URL for an uploaded object"""

        def _resolve():
            bucket = self._bucket()
            blob = bucket.get_blob(path)
            if blob is None:
                raise CollaboratorError(f"Object {path} does not exist")
            tokens = (blob.metadata or {}).get(DOWNLOAD_TOKENS_KEY)
            if not tokens:
                tokens = str(uuid.uuid4())
                blob.metadata = {**(blob.metadata or {}), DOWNLOAD_TOKENS_KEY: tokens}
                blob.patch()
            token = tokens.split(",")[0]
            return (
                f"https://firebasestorage.googleapis.com/v0/b/{bucket.name}/o/"
                f"{quote(path, safe='')}?alt=media&token={token}"
            )

        return await self._call("resolve_blob", _resolve)


# Global Firebase service instance
firebase_service = FirebaseService()
