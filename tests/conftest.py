import copy
import itertools
from collections import defaultdict
from datetime import datetime, timedelta, UTC

import pytest
from fastapi.testclient import TestClient
from firebase_admin import firestore

from vspress.config import settings
from vspress.dependencies import get_firebase
from vspress.main import app
from vspress.models.context import PressContext
from vspress.models.user import SessionUser, UserProfile, UserRole
from vspress.services.article_service import ArticleService
from vspress.services.auth_service import AuthService
from vspress.services.comment_service import CommentService
from vspress.services.firebase_service import CollaboratorError
from vspress.utils.security import create_session_token


ADMIN_EMAIL = "editor@vspress.org"


class FakeFirebase:
    """
    In-memory stand-in for FirebaseService

    Documents live in ``collections[path][doc_id]``. Updates honour the
    Firestore increment, array-union, array-remove and server-timestamp
    transforms. Every call is recorded in ``calls``; operations named in
    ``fail_on`` raise CollaboratorError.
    """

    def __init__(self):
        self.collections = defaultdict(dict)
        self.accounts = {}
        self.display_names = {}
        self.blobs = {}
        self.signed_out = []
        self.calls = []
        self.fail_on = set()
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def _record(self, operation, *args):
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise CollaboratorError(f"{operation} unavailable")

    def calls_to(self, operation):
        return [c for c in self.calls if c[0] == operation]

    def _now(self):
        # strictly increasing so ordering by createdAt is deterministic
        self._clock += timedelta(seconds=1)
        return self._clock

    def _resolve(self, current, value):
        if value is firestore.SERVER_TIMESTAMP:
            return self._now()
        if isinstance(value, firestore.Increment):
            return (current or 0) + value.value
        if isinstance(value, firestore.ArrayUnion):
            items = list(current or [])
            items.extend(v for v in value.values if v not in items)
            return items
        if isinstance(value, firestore.ArrayRemove):
            return [v for v in (current or []) if v not in value.values]
        return copy.deepcopy(value)

    def _write(self, target, data):
        for key, value in data.items():
            target[key] = self._resolve(target.get(key), value)

    # identity

    async def create_account(self, email, password):
        self._record("create_account", email)
        if email in self.accounts:
            raise CollaboratorError("EMAIL_EXISTS")
        uid = f"uid-{next(self._ids)}"
        self.accounts[email] = (uid, password)
        return uid

    async def authenticate(self, email, password):
        self._record("authenticate", email)
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise CollaboratorError("INVALID_LOGIN_CREDENTIALS")
        return account[0]

    async def sign_out(self, uid):
        self._record("sign_out", uid)
        self.signed_out.append(uid)

    async def update_display_name(self, uid, display_name):
        self._record("update_display_name", uid, display_name)
        self.display_names[uid] = display_name

    # documents

    async def list_documents(self, collection, order_by=None, descending=False,
                             limit=None, filters=None):
        self._record("list_documents", collection)
        items = list(self.collections[collection].items())
        for field, op, value in filters or []:
            assert op == "==", "only equality filters are faked"
            items = [(i, d) for i, d in items if d.get(field) == value]
        if order_by:
            items.sort(
                key=lambda item: (item[1].get(order_by) is not None, item[1].get(order_by)),
                reverse=descending,
            )
        if limit:
            items = items[:limit]
        return [(doc_id, copy.deepcopy(data)) for doc_id, data in items]

    async def get_document(self, collection, doc_id):
        self._record("get_document", collection, doc_id)
        data = self.collections[collection].get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def create_document(self, collection, data):
        self._record("create_document", collection, data)
        doc_id = f"doc-{next(self._ids)}"
        target = {}
        self._write(target, data)
        self.collections[collection][doc_id] = target
        return doc_id

    async def set_document(self, collection, doc_id, data):
        self._record("set_document", collection, doc_id, data)
        target = {}
        self._write(target, data)
        self.collections[collection][doc_id] = target

    async def update_document(self, collection, doc_id, data):
        self._record("update_document", collection, doc_id, data)
        target = self.collections[collection].get(doc_id)
        if target is None:
            raise CollaboratorError(f"No document to update: {collection}/{doc_id}")
        self._write(target, data)

    async def delete_document(self, collection, doc_id):
        self._record("delete_document", collection, doc_id)
        self.collections[collection].pop(doc_id, None)

    # storage

    async def upload_blob(self, path, content, content_type):
        self._record("upload_blob", path, content_type)
        self.blobs[path] = (content, content_type)
        return path

    async def resolve_blob(self, path):
        self._record("resolve_blob", path)
        return f"https://storage.test/{path}?alt=media"

    # seeding helpers, not part of the service surface

    def add_article(self, title="Spring Fair", **fields):
        doc_id = fields.pop("id", None) or f"article-{next(self._ids)}"
        self.collections["articles"][doc_id] = {
            "title": title,
            "excerpt": f"{title} excerpt",
            "content": f"<p>{title} body</p>",
            "imageUrl": f"https://storage.test/{doc_id}.jpg",
            "author": "Editor",
            "authorId": "admin-uid",
            "createdAt": self._now(),
            "category": "Events",
            "likes": 0,
            "likedBy": [],
            "commentsCount": 0,
            "featured": False,
            "views": 0,
            **fields,
        }
        return doc_id

    def add_comment(self, article_id, user_id, text, user_name="Reader"):
        doc_id = f"comment-{next(self._ids)}"
        self.collections[f"articles/{article_id}/comments"][doc_id] = {
            "userId": user_id,
            "userName": user_name,
            "text": text,
            "createdAt": self._now(),
        }
        return doc_id

    def add_profile(self, uid, email, display_name, role="user"):
        self.collections["users"][uid] = {
            "uid": uid,
            "email": email,
            "displayName": display_name,
            "role": role,
            "createdAt": self._now(),
        }


def make_context(uid=None, name="Reader", role=UserRole.USER):
    if uid is None:
        return PressContext()
    return PressContext(
        user=SessionUser(uid=uid, email=f"{uid}@vspress.org"),
        profile=UserProfile(uid=uid, email=f"{uid}@vspress.org",
                            display_name=name, role=role),
    )


@pytest.fixture
def fake_firebase():
    return FakeFirebase()


@pytest.fixture
def article_service(fake_firebase):
    return ArticleService(fake_firebase)


@pytest.fixture
def comment_service(fake_firebase):
    return CommentService(fake_firebase)


@pytest.fixture
def auth_service(fake_firebase):
    return AuthService(fake_firebase, admin_email=ADMIN_EMAIL)


@pytest.fixture
def anon_ctx():
    return make_context()


@pytest.fixture
def user_ctx():
    return make_context("reader-uid", "Reader")


@pytest.fixture
def admin_ctx():
    return make_context("admin-uid", "Editor", UserRole.ADMIN)


@pytest.fixture
def client(fake_firebase):
    """TestClient wired to the in-memory Firebase"""
    app.dependency_overrides[get_firebase] = lambda: fake_firebase
    yield TestClient(app)
    app.dependency_overrides = {}


def session_cookie(fake_firebase, uid, name="Reader", role="user"):
    """Seed a profile and return a session token for it"""
    email = f"{uid}@vspress.org"
    fake_firebase.add_profile(uid, email, name, role)
    return create_session_token(uid, email)["access_token"]


def sign_in(client, fake_firebase, uid, name="Reader", role="user"):
    client.cookies.set(settings.SESSION_COOKIE_NAME,
                       session_cookie(fake_firebase, uid, name, role))


def bearer(fake_firebase, uid, name="Reader", role="user"):
    return {"Authorization": f"Bearer {session_cookie(fake_firebase, uid, name, role)}"}
