"""
Tests for the service layer against in-memory stores.
"""

import pytest
from starlette.requests import Request

from stockroom.services import AuthorizationService, DataService, ItemService, SettingsService, UserService
from stockroom.utils import hash_password, new_salt, verify_password


def make_request(headers=None):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


@pytest.fixture
def users(document_store):
    return UserService(document_store)


@pytest.fixture
def auth(users, session_store):
    return AuthorizationService(users, session_store, session_ttl=3600)


def test_password_hash_is_salted():
    salt = new_salt()
    digest = hash_password("secret", salt)
    assert len(digest) == 128
    assert digest != hash_password("secret", new_salt())
    assert verify_password("secret", salt, digest)
    assert not verify_password("wrong", salt, digest)


class TestDataService:
    @pytest.mark.asyncio
    async def test_crud(self, document_store):
        service = DataService("things", document_store)
        created = await service.create({"name": "Rope"})

        assert await service.get_by_id(created["id"]) == created
        assert await service.find_one({"name": "Rope"}) == created
        assert await service.find_all({"name": "Chain"}) == []

        updated = await service.update({"id": created["id"], "name": "Chain"})
        assert updated["name"] == "Chain"
        assert await service.update({"id": "missing"}) is None

        assert await service.delete(created["id"]) is True
        assert await service.delete(created["id"]) is False

    @pytest.mark.asyncio
    async def test_update_many_keeps_order(self, document_store):
        service = DataService("things", document_store)
        a = await service.create({"n": 1})
        b = await service.create({"n": 2})

        results = await service.update_many([{"id": b["id"], "n": 20}, {"id": "missing"}, {"id": a["id"], "n": 10}])
        assert [r and r["n"] for r in results] == [20, None, 10]

    @pytest.mark.asyncio
    async def test_seed_only_into_empty_collection(self, document_store):
        service = DataService("things", document_store)
        assert await service.seed([{"n": 1}, {"n": 2}]) == 2
        assert await service.seed([{"n": 3}]) == 0
        assert len(await service.get_all()) == 2


class TestSeeding:
    @pytest.mark.asyncio
    async def test_item_seed(self, document_store):
        items = ItemService(document_store)
        await items.init()
        await items.init()
        assert [i["brand"] for i in await items.get_all()] == ["Ballistol"]

    @pytest.mark.asyncio
    async def test_settings_seed(self, document_store):
        settings = SettingsService(document_store)
        await settings.init()
        defaults = await settings.get_defaults()
        assert defaults["currencySymbol"] == "€"


class TestUserService:
    @pytest.mark.asyncio
    async def test_sanitized_reads_hide_credentials(self, users):
        await users.init()

        admin = await users.find_one({"name": "admin"})
        assert "password" not in admin and "salt" not in admin

        raw = await users.find_one({"name": "admin"}, skip_sanitization=True)
        assert raw["password"] == hash_password("admin", raw["salt"])

    @pytest.mark.asyncio
    async def test_sanitize_does_not_mutate(self, users):
        document = {"name": "a", "password": "p", "salt": "s"}
        assert users.sanitize(document) == {"name": "a"}
        assert document["password"] == "p"


class TestAuthorizationService:
    @pytest.mark.asyncio
    async def test_login_stores_session(self, users, auth, session_store):
        await users.init()
        token = await auth.authorize_user_and_password("admin", "admin")

        assert token is not None
        assert session_store.values[token.auth_id] == token.auth_token
        assert session_store.ttls[token.auth_id] == 3600

    @pytest.mark.asyncio
    async def test_login_failures(self, users, auth):
        await users.init()
        assert await auth.authorize_user_and_password("admin", "nope") is None
        assert await auth.authorize_user_and_password("ghost", "admin") is None

    @pytest.mark.asyncio
    async def test_authorized_attaches_user(self, users, auth):
        await users.init()
        token = await auth.authorize_user_and_password("admin", "admin")
        request = make_request({"auth-id": token.auth_id, "auth-token": token.auth_token})

        assert await auth.authorized(request)
        assert request.state.user["name"] == "admin"
        assert "password" not in request.state.user

    @pytest.mark.asyncio
    async def test_authorized_rejects(self, users, auth):
        await users.init()
        token = await auth.authorize_user_and_password("admin", "admin")

        assert not await auth.authorized(make_request())
        assert not await auth.authorized(make_request({"auth-id": token.auth_id, "auth-token": "forged"}))
        assert not await auth.authorized(make_request({"auth-id": "someone", "auth-token": token.auth_token}))

    @pytest.mark.asyncio
    async def test_logout(self, users, auth, session_store):
        await users.init()
        token = await auth.authorize_user_and_password("admin", "admin")
        request = make_request({"auth-id": token.auth_id, "auth-token": token.auth_token})

        assert await auth.logout(request)
        assert token.auth_id not in session_store.values
        assert not await auth.logout(request)

    @pytest.mark.asyncio
    async def test_zero_ttl_means_no_expiry(self, users, session_store):
        await users.init()
        auth = AuthorizationService(users, session_store, session_ttl=0)
        token = await auth.authorize_user_and_password("admin", "admin")
        assert session_store.ttls[token.auth_id] is None
