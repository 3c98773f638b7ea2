"""
Supabase adapters against duck-typed client stubs (no network).

The stubs record the builder calls so the tests can assert the exact query
shape the adapters send.
"""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from portal.identity_access.accounts import SupabaseAccountProvisioner
from portal.identity_access.errors import INVALID_CREDENTIALS, PROVIDER_UNAVAILABLE, AuthError
from portal.identity_access.provider import SupabaseAuthProvider, session_from_provider
from portal.records.ports import RecordStoreError
from portal.records.storage_supabase import SupabaseFileStore
from portal.records.supabase_store import SupabaseRecordStore


pytestmark = pytest.mark.anyio("asyncio")


class _Query:
    def __init__(self, table, log, data=None, error=None):
        self.table = table
        self.log = log
        self.data = data if data is not None else []
        self.error = error

    def __getattr__(self, name):
        def _call(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return _call

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


class _Client:
    def __init__(self, data=None, error=None):
        self.log = []
        self.data = data
        self.error = error

    def table(self, name):
        self.log.append(("table", (name,), {}))
        return _Query(name, self.log, self.data, self.error)


class _ApiError(Exception):
    def __init__(self, code):
        super().__init__(code)
        self.code = code


def test_select_builds_filtered_projected_query():
    client = _Client(data=[{"role": "admin"}])
    store = SupabaseRecordStore(client)

    rows = store.select("profiles", {"id": "u1", "deleted_at": None}, columns=("role",), order_by="created_at", descending=True, limit=1)

    assert rows == [{"role": "admin"}]
    assert client.log == [
        ("table", ("profiles",), {}),
        ("select", ("role",), {}),
        ("eq", ("id", "u1"), {}),
        ("is_", ("deleted_at", "null"), {}),
        ("order", ("created_at",), {"desc": True}),
        ("limit", (1,), {}),
    ]


def test_unique_violation_maps_to_duplicate_key():
    store = SupabaseRecordStore(_Client(error=_ApiError("23505")))

    with pytest.raises(RecordStoreError) as exc:
        store.insert("profiles", {"id": "x"})

    assert exc.value.code == "duplicate_key"


def test_other_failures_map_to_store_error():
    store = SupabaseRecordStore(_Client(error=RuntimeError("down")))

    with pytest.raises(RecordStoreError) as exc:
        store.select("companies")

    assert exc.value.code == "store_error"


def test_writes_publish_to_the_feed():
    store = SupabaseRecordStore(_Client(data=[{"id": "c1", "name": "Acme"}]))
    seen = []
    store.subscribe("companies", "*", seen.append)

    store.update("companies", {"id": "c1"}, {"name": "Acme"})
    removed = store.delete("companies", {"id": "c1"})

    assert [e.kind for e in seen] == ["UPDATE", "DELETE"]
    assert removed == 1


def test_unfiltered_update_is_refused_before_any_call():
    client = _Client()

    with pytest.raises(RecordStoreError):
        SupabaseRecordStore(client).update("profiles", {}, {"role": "admin"})

    assert client.log == []


class _Bucket:
    def __init__(self, url_response, fail=False):
        self.uploads = []
        self.url_response = url_response
        self.fail = fail

    def upload(self, key, data, options):
        if self.fail:
            raise RuntimeError("storage down")
        self.uploads.append((key, data, options))

    def get_public_url(self, key):
        return self.url_response


def _storage_client(bucket):
    return SimpleNamespace(storage=SimpleNamespace(from_=lambda name: bucket))


@pytest.mark.parametrize(
    "response",
    ["https://cdn/resumes/3/a.pdf", {"publicURL": "https://cdn/resumes/3/a.pdf"}, {"data": {"publicUrl": "https://cdn/resumes/3/a.pdf"}}],
)
def test_file_upload_returns_public_url(response):
    bucket = _Bucket(response)

    url = SupabaseFileStore(_storage_client(bucket)).upload(
        bucket="resumes", path="resumes/3/a.pdf", data=b"%PDF-", content_type="application/pdf"
    )

    assert url == "https://cdn/resumes/3/a.pdf"
    assert bucket.uploads[0][0] == "3/a.pdf"
    assert bucket.uploads[0][2]["content-type"] == "application/pdf"


def test_file_upload_failure_is_reported():
    with pytest.raises(RuntimeError) as exc:
        SupabaseFileStore(_storage_client(_Bucket("x", fail=True))).upload(
            bucket="resumes", path="3/a.pdf", data=b"%PDF-", content_type="application/pdf"
        )
    assert str(exc.value) == "upload_failed"


class _Auth:
    def __init__(self, result=None, error=None, current=None):
        self.result = result
        self.error = error
        self.current = current
        self.signed_out = 0
        self.callbacks = []
        self.admin = SimpleNamespace(
            create_user=lambda attrs: SimpleNamespace(user=SimpleNamespace(id="new-id")),
            update_user_by_id=lambda uid, attrs: None,
            delete_user=lambda uid: None,
        )

    def sign_in_with_password(self, credentials):
        if self.error is not None:
            raise self.error
        return self.result

    def get_session(self):
        return self.current

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.callbacks.remove(callback))

    def sign_out(self):
        self.signed_out += 1


class _AuthApiError(Exception):
    def __init__(self, status):
        super().__init__("auth error")
        self.status = status


def _raw_session(uid="u1", email="u1@example.com"):
    user = SimpleNamespace(id=uid, email=email, user_metadata={"name": "User One"})
    return SimpleNamespace(user=user, expires_at=4102444800, access_token="secret-token")


@pytest.mark.anyio
async def test_provider_sign_in_maps_session():
    raw = _raw_session()
    provider = SupabaseAuthProvider(SimpleNamespace(auth=_Auth(result=SimpleNamespace(session=raw, user=raw.user))))

    session = await provider.sign_in("u1@example.com", "pw")

    assert session.subject_id == "u1"
    assert session.name == "User One"
    assert not session.is_demo


@pytest.mark.anyio
@pytest.mark.parametrize("error,code", [(_AuthApiError(400), INVALID_CREDENTIALS), (_AuthApiError(503), PROVIDER_UNAVAILABLE), (ConnectionError(), PROVIDER_UNAVAILABLE)])
async def test_provider_sign_in_classifies_errors(error, code):
    provider = SupabaseAuthProvider(SimpleNamespace(auth=_Auth(error=error)))

    with pytest.raises(AuthError) as exc:
        await provider.sign_in("u1@example.com", "pw")

    assert exc.value.code == code


@pytest.mark.anyio
async def test_provider_session_change_relay_and_unsubscribe():
    auth = _Auth()
    provider = SupabaseAuthProvider(SimpleNamespace(auth=auth))
    seen = []

    unsubscribe = provider.on_session_change(lambda event, session: seen.append((event, session)))
    auth.callbacks[0](SimpleNamespace(value="TOKEN_REFRESHED"), _raw_session())
    unsubscribe()

    assert seen[0][0] == "TOKEN_REFRESHED"
    assert seen[0][1].subject_id == "u1"
    assert auth.callbacks == []


def test_incomplete_provider_session_maps_to_none():
    assert session_from_provider(None) is None
    assert session_from_provider(SimpleNamespace(user=SimpleNamespace(id=None))) is None


def test_account_provisioner_uses_admin_api():
    auth = _Auth()
    provisioner = SupabaseAccountProvisioner(SimpleNamespace(auth=auth))

    assert provisioner.create_account(email="n@example.com", password="secret1", name="N") == "new-id"


def test_account_provisioner_failure_raises_code():
    auth = _Auth()

    def _fail(attrs):
        raise RuntimeError("admin api down")

    auth.admin.create_user = _fail

    with pytest.raises(ValueError) as exc:
        SupabaseAccountProvisioner(SimpleNamespace(auth=auth)).create_account(email="n@example.com", password="secret1", name="N")
    assert str(exc.value) == "account_create_failed"
