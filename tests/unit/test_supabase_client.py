from unittest.mock import AsyncMock

import core.supabase_client as supabase_client


async def test_init_without_credentials_leaves_identity_disabled(monkeypatch):
    monkeypatch.setattr(supabase_client, "_global_supabase_client", None)

    await supabase_client.init_supabase_client()

    assert supabase_client.get_supabase_client() is None


async def test_close_releases_auth_http_session(monkeypatch):
    client = AsyncMock()
    monkeypatch.setattr(supabase_client, "_global_supabase_client", client)

    await supabase_client.close_supabase_client()

    client.auth.close.assert_awaited_once()
    assert supabase_client.get_supabase_client() is None


async def test_close_without_client_is_a_no_op(monkeypatch):
    monkeypatch.setattr(supabase_client, "_global_supabase_client", None)

    await supabase_client.close_supabase_client()

    assert supabase_client.get_supabase_client() is None
