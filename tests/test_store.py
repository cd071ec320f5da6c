"""
Tests for the record stores.
"""

import fnmatch
import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from passless import Passless
from passless.errors import StorageError
from passless.passkey import ChallengeRecord, CredentialRecord
from passless.store import MemoryStore, RedisStore


class FakeRedis:
    """Minimal async Redis client for RedisStore tests."""

    def __init__(self, fail=False):
        self.data = {}
        self.expiry = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.data[key] = value
        self.expiry[key] = ex

    async def delete(self, key):
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    async def scan_iter(self, match=None):
        self._check()
        for key in list(self.data):
            if match is None or fnmatch.fnmatch(key, match):
                yield key


def make_credential(user_id="u1", credential_id=b"cred-1"):
    return CredentialRecord(
        credential_id=credential_id,
        user_id=user_id,
        public_key=b"\x00\x01public",
        sign_count=3,
        transports=["usb"],
    )


class TestMemoryStore:
    """Test in-memory store"""

    @pytest.mark.asyncio
    async def test_basic_operations(self):
        store = MemoryStore()
        record = ChallengeRecord(challenge="c1", user_id="u1")

        await store.set("c1", record)
        assert await store.get("c1") is record
        assert await store.contains("c1")
        assert await store.count() == 1
        assert await store.keys() == ["c1"]

        assert await store.delete("c1") is True
        assert await store.delete("c1") is False
        assert await store.get("c1") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_initial_records(self):
        store = MemoryStore([("a", 1), ("b", 2)])
        assert sorted(await store.values()) == [1, 2]

        await store.clear()
        assert await store.values() == []


class TestRedisStore:
    """Test Redis-backed store"""

    @pytest.mark.asyncio
    async def test_credential_round_trip(self):
        client = FakeRedis()
        store = RedisStore(client, CredentialRecord, key_prefix="test:cred:")
        credential = make_credential()

        await store.set(credential.key, credential)
        assert f"test:cred:{credential.key}" in client.data

        loaded = await store.get(credential.key)
        assert loaded.credential_id == b"cred-1"
        assert loaded.public_key == b"\x00\x01public"
        assert loaded.sign_count == 3
        assert loaded.transports == ["usb"]

    @pytest.mark.asyncio
    async def test_values_limited_to_prefix(self):
        client = FakeRedis()
        client.data["other:key"] = "{}"
        store = RedisStore(client, CredentialRecord, key_prefix="test:cred:")

        await store.set("a", make_credential("u1", b"a"))
        await store.set("b", make_credential("u2", b"b"))

        users = sorted(c.user_id for c in await store.values())
        assert users == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_ttl_and_delete(self):
        client = FakeRedis()
        store = RedisStore(client, ChallengeRecord, key_prefix="test:ch:", ttl_seconds=300)
        record = ChallengeRecord(challenge="c1", user_id="u1", ceremony="authentication")

        await store.set("c1", record)
        assert client.expiry["test:ch:c1"] == 300
        assert (await store.get("c1")).ceremony == "authentication"

        assert await store.delete("c1") is True
        assert await store.delete("c1") is False
        assert await store.get("c1") is None

    @pytest.mark.asyncio
    async def test_backend_errors_wrapped(self):
        store = RedisStore(FakeRedis(fail=True), ChallengeRecord)

        with pytest.raises(StorageError) as exc_info:
            await store.get("c1")
        assert exc_info.value.operation == "get"

        with pytest.raises(StorageError):
            await store.values()

    @pytest.mark.asyncio
    async def test_passless_with_redis_stores(self, config):
        client = FakeRedis()
        passless = Passless(
            config,
            challenge_store=RedisStore(client, ChallengeRecord, key_prefix="p:ch:"),
            credential_store=RedisStore(client, CredentialRecord, key_prefix="p:cred:"),
        )

        await passless.create_passkey_registration_options("u1", "user", "User")

        records = await passless.challenge_store.values()
        assert [r.user_id for r in records] == ["u1"]

    def test_default_prefix_per_record_type(self):
        client = FakeRedis()
        assert RedisStore(client, ChallengeRecord).key_prefix == "passless:challenge:"
        assert RedisStore(client, CredentialRecord).key_prefix == "passless:credential:"

    @pytest.mark.asyncio
    async def test_default_prefixes_share_one_client(self, config):
        client = FakeRedis()
        passless = Passless(
            config,
            challenge_store=RedisStore(client, ChallengeRecord),
            credential_store=RedisStore(client, CredentialRecord),
        )

        await passless.create_passkey_registration_options("u1", "user", "User")
        await passless.create_passkey_registration_options("u1", "user", "User")
        await passless.create_passkey_authentication_options("u1")

        assert await passless.credential_store.values() == []
        assert len(await passless.challenge_store.values()) == 3

    @pytest.mark.asyncio
    async def test_undecodable_record_wrapped(self):
        client = FakeRedis()
        store = RedisStore(client, CredentialRecord)
        client.data["passless:credential:bad"] = json.dumps({"challenge": "c1", "user_id": "u1"})
        client.data["passless:credential:junk"] = "not json"

        with pytest.raises(StorageError) as exc_info:
            await store.get("bad")
        assert exc_info.value.operation == "decode"

        with pytest.raises(StorageError):
            await store.get("junk")
        with pytest.raises(StorageError):
            await store.values()
