"""
Unit tests for the admin authentication module.
"""

import logging
import re
import secrets
from unittest.mock import AsyncMock, patch

import pytest

from foodlog.config.provider import AuthConfig
from foodlog.modules.auth import AdminAuthModule, AuthFactory, extract_token
from foodlog.modules.storage import InMemoryTokenStore, TokenRecord, TokenStoreUnavailable

from conftest import ADMIN_PIN, ONE_DAY, START_TIME

HOUR = 60 * 60


@pytest.mark.asyncio
@pytest.mark.parametrize("pin", ["0000", "", "424", "42420", " 4242", "４２４２", "4242\n"])
async def test_wrong_pin_is_rejected_without_token(auth_module, memory_store, pin):
    """Test that any PIN other than the configured one creates nothing."""
    result = await auth_module.login(pin)

    assert result.ok is False
    assert result.token is None
    assert result.error == "Invalid PIN"
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_login_issues_stored_token(auth_module, memory_store):
    """Test successful login writes one record with role and expiry."""
    result = await auth_module.login(ADMIN_PIN)

    assert result.ok is True
    assert re.fullmatch(r"[0-9a-f]{64}", result.token)
    assert result.expires_at == START_TIME + ONE_DAY
    assert len(memory_store) == 1

    record = await memory_store.get(f"token:{result.token}")
    assert record == TokenRecord(role="admin", issued_at=START_TIME, expires_at=START_TIME + ONE_DAY)


@pytest.mark.asyncio
async def test_pin_comparison_is_constant_time(auth_module):
    with patch("secrets.compare_digest", wraps=secrets.compare_digest) as compare:
        await auth_module.login("1234")

    compare.assert_called_once_with(b"1234", ADMIN_PIN.encode("utf-8"))


@pytest.mark.asyncio
@pytest.mark.parametrize("pin", ["", "0000", ADMIN_PIN])
async def test_unconfigured_pin_never_matches(memory_store, clock, pin):
    """Test that a missing ADMIN_PIN disables login with the usual error."""
    module = AdminAuthModule(AuthConfig(admin_pin=""), memory_store, clock=clock)

    result = await module.login(pin)

    assert module.is_enabled is False
    assert result.ok is False
    assert result.error == "Invalid PIN"
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_unconfigured_pin_still_runs_comparison(memory_store, clock):
    """Test that a missing ADMIN_PIN costs the same comparison as a wrong one."""
    module = AdminAuthModule(AuthConfig(admin_pin=""), memory_store, clock=clock)

    with patch("secrets.compare_digest", wraps=secrets.compare_digest) as compare:
        result = await module.login("1234")

    compare.assert_called_once()
    assert compare.call_args.args[0] == b"1234"
    assert result.ok is False


@pytest.mark.asyncio
async def test_factory_clock_drives_expiry(clock):
    service = AuthFactory.build_for_testing(admin_pin=ADMIN_PIN, token_ttl_seconds=60, clock=clock)

    login = await service.login(ADMIN_PIN)
    clock.advance(59)
    assert (await service.validate(login.token)).valid is True

    clock.advance(1)
    assert login.expires_at == START_TIME + 60
    assert (await service.validate(login.token)).valid is False


@pytest.mark.asyncio
async def test_login_skips_token_already_in_store(auth_module, memory_store):
    """Test freshness: a generated token that is already stored is not reused."""
    taken, fresh = "a" * 64, "b" * 64
    existing = TokenRecord(role="admin", issued_at=0, expires_at=START_TIME + 10)
    await memory_store.set(f"token:{taken}", existing)

    with patch.object(AdminAuthModule, "generate_token", side_effect=[taken, fresh]):
        result = await auth_module.login(ADMIN_PIN)

    assert result.token == fresh
    assert await memory_store.get(f"token:{taken}") == existing


@pytest.mark.asyncio
async def test_login_gives_up_after_repeated_collisions(auth_module, memory_store):
    taken = "a" * 64
    await memory_store.set(f"token:{taken}", TokenRecord("admin", 0, START_TIME + 10))

    with patch.object(AdminAuthModule, "generate_token", return_value=taken):
        with pytest.raises(RuntimeError):
            await auth_module.login(ADMIN_PIN)


@pytest.mark.asyncio
async def test_validate_before_and_at_expiry(auth_module, memory_store, clock):
    result = await auth_module.login(ADMIN_PIN)

    clock.advance(ONE_DAY - 1)
    check = await auth_module.validate(result.token)
    assert check.valid is True
    assert check.role == "admin"
    assert check.expires_at == result.expires_at

    clock.advance(1)
    check = await auth_module.validate(result.token)
    assert check.valid is False
    assert check.role is None
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_expired_record_is_removed_eagerly(clock):
    """Test the expiry check at read time even when the store keeps the key."""
    store = InMemoryTokenStore(clock=clock)
    module = AdminAuthModule(AuthConfig(admin_pin=ADMIN_PIN), store, clock=clock)
    # No TTL on the store side, so only the record's expires_at applies
    await store.set("token:old", TokenRecord("admin", START_TIME - 100, START_TIME - 1))

    assert (await module.validate("old")).valid is False
    assert "token:old" not in store


@pytest.mark.asyncio
async def test_expired_cleanup_failure_is_not_fatal(auth_config, clock):
    store = AsyncMock()
    store.get.return_value = TokenRecord("admin", START_TIME - 100, START_TIME - 1)
    store.delete.side_effect = TokenStoreUnavailable("down")
    module = AdminAuthModule(auth_config, store, clock=clock)

    result = await module.validate("old")

    assert result.valid is False
    store.delete.assert_called_once_with("token:old")


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", None])
async def test_validate_empty_token_skips_store(auth_config, clock, token):
    store = AsyncMock()
    module = AdminAuthModule(auth_config, store, clock=clock)

    result = await module.validate(token)

    assert result.valid is False
    store.get.assert_not_called()


@pytest.mark.asyncio
async def test_validate_unknown_token(auth_module):
    assert (await auth_module.validate("doesnotexist")).valid is False


@pytest.mark.asyncio
async def test_store_outage_is_not_an_invalid_token(auth_config, clock):
    """Test that store errors propagate instead of reading as 'invalid'."""
    store = AsyncMock()
    store.get.side_effect = TokenStoreUnavailable("connection refused")
    module = AdminAuthModule(auth_config, store, clock=clock)

    with pytest.raises(TokenStoreUnavailable):
        await module.validate("abc123")

    with pytest.raises(TokenStoreUnavailable):
        await module.login(ADMIN_PIN)


@pytest.mark.asyncio
async def test_logout_revokes_active_token(auth_module, memory_store):
    result = await auth_module.login(ADMIN_PIN)

    await auth_module.logout(result.token)

    assert (await auth_module.validate(result.token)).valid is False
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_logout_expired_and_unknown_tokens(auth_module, clock):
    result = await auth_module.login(ADMIN_PIN)
    clock.advance(ONE_DAY + 1)

    await auth_module.logout(result.token)
    await auth_module.logout("never-issued")
    await auth_module.logout("")

    assert (await auth_module.validate(result.token)).valid is False
    assert (await auth_module.validate("never-issued")).valid is False


@pytest.mark.asyncio
async def test_logout_is_idempotent(auth_module):
    result = await auth_module.login(ADMIN_PIN)

    assert await auth_module.logout(result.token) is None
    assert await auth_module.logout(result.token) is None
    assert (await auth_module.validate(result.token)).valid is False


@pytest.mark.asyncio
async def test_sessions_are_isolated(auth_module):
    """Test two logins give distinct tokens and revoking one keeps the other."""
    first = await auth_module.login(ADMIN_PIN)
    second = await auth_module.login(ADMIN_PIN)

    assert first.token != second.token

    await auth_module.logout(first.token)

    assert (await auth_module.validate(first.token)).valid is False
    assert (await auth_module.validate(second.token)).valid is True


@pytest.mark.asyncio
async def test_admin_session_scenario(clock):
    """Walk through a day in the life of an admin token with PIN 4242."""
    service = AuthFactory.build_for_testing(
        admin_pin="4242", token_ttl_seconds=ONE_DAY, clock=clock
    )

    with patch.object(AdminAuthModule, "generate_token", return_value="abc123"):
        login = await service.login("4242")
    assert login.ok is True
    assert login.token == "abc123"
    assert login.expires_at == START_TIME + ONE_DAY

    clock.advance(HOUR)
    assert (await service.validate("abc123")).valid is True

    clock.advance(24 * HOUR)
    assert (await service.validate("abc123")).valid is False

    assert (await service.validate("doesnotexist")).valid is False

    rejected = await service.login("0000")
    assert rejected.ok is False


@pytest.mark.asyncio
async def test_pin_never_logged(caplog, memory_store, clock):
    pin = "pin-secret-9"
    module = AdminAuthModule(AuthConfig(admin_pin=pin), memory_store, clock=clock)
    caplog.set_level(logging.DEBUG, logger="foodlog")

    result = await module.login(pin)
    await module.login("wrong-guess")
    await module.logout(result.token)

    assert pin not in caplog.text
    assert "wrong-guess" not in caplog.text
    assert result.token not in caplog.text


class TestAuthenticationService:
    """Test the facade used by the HTTP layer."""

    @pytest.mark.asyncio
    async def test_authenticate_bearer_header(self, auth_service):
        login = await auth_service.login(ADMIN_PIN)

        result = await auth_service.authenticate(f"Bearer {login.token}")

        assert result.valid is True
        assert result.role == "admin"

    @pytest.mark.asyncio
    async def test_authenticate_admin_token_header(self, auth_service):
        login = await auth_service.login(ADMIN_PIN)

        result = await auth_service.authenticate(None, login.token)

        assert result.valid is True

    @pytest.mark.asyncio
    async def test_authenticate_without_credentials(self, auth_service):
        assert (await auth_service.authenticate(None)).valid is False
        assert (await auth_service.authenticate("Basic dXNlcjpwdw==")).valid is False

    @pytest.mark.parametrize("blank", ["", "   ", "\t"])
    def test_blank_sources_fall_through(self, blank):
        assert extract_token(blank, "Bearer abc", None) == "abc"
        assert extract_token(blank, f"Bearer {blank}", " xyz ") == "xyz"
        assert extract_token(None, None, blank) == ""

    def test_body_token_wins_over_headers(self):
        assert extract_token(" body ", "Bearer header", "other") == "body"

    def test_is_enabled(self, auth_service):
        assert auth_service.is_enabled is True
        assert AuthFactory.build_for_testing().is_enabled is False
