"""Tests for adapters that talk to remote services."""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from nutrilog.adapters.fdc_client import HttpxFdcClient
from nutrilog.adapters.openai_food_recognition_client import (
    OpenAIFoodRecognitionClient,
)
from nutrilog.adapters.supabase_identity_provider import SupabaseIdentityProvider


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return SimpleNamespace(output_text=self.output_text)


class _FakeOpenAI:
    def __init__(self, output_text: str = '{"items": []}') -> None:
        self.responses = _FakeResponses(output_text)


class _FakeAuth:
    def __init__(self, session: object | None) -> None:
        self.session = session
        self.calls: list[tuple[str, object]] = []

    def _respond(self, name: str, payload: object) -> SimpleNamespace:
        self.calls.append((name, payload))
        user = SimpleNamespace(id="user-1", email="alex@example.com")
        return SimpleNamespace(user=user, session=self.session)

    def sign_up(self, payload):  # type: ignore[no-untyped-def]
        return self._respond("sign_up", payload)

    def verify_otp(self, payload):  # type: ignore[no-untyped-def]
        return self._respond("verify_otp", payload)

    def sign_in_with_password(self, payload):  # type: ignore[no-untyped-def]
        return self._respond("sign_in_with_password", payload)

    def update_user(self, payload):  # type: ignore[no-untyped-def]
        return self._respond("update_user", payload)

    def resend(self, payload):  # type: ignore[no-untyped-def]
        return self._respond("resend", payload)


def _auth_session() -> SimpleNamespace:
    return SimpleNamespace(
        access_token="access", refresh_token="refresh", expires_at=1700000000
    )


def test_openai_client_requests_structured_output() -> None:
    openai = _FakeOpenAI()
    client = OpenAIFoodRecognitionClient(client=openai)

    output = asyncio.run(
        client.recognize(
            model="gpt-4o",
            instructions="Identify foods",
            text="Analyze this image",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            schema={"type": "object"},
        )
    )

    payload = openai.responses.last_payload
    assert output == '{"items": []}'
    assert payload["store"] is False
    assert payload["text"]["format"]["type"] == "json_schema"
    assert payload["text"]["format"]["strict"] is True
    content = payload["input"][0]["content"]
    assert content[1] == {
        "type": "input_image",
        "image_url": "data:image/jpeg;base64,ZmFrZQ==",
    }


def test_openai_client_rejects_empty_output() -> None:
    client = OpenAIFoodRecognitionClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.recognize(
                model="gpt-4o-mini",
                instructions="Identify foods",
                text="an apple",
                image_data_url=None,
                schema={"type": "object"},
            )
        )


def test_fdc_client_search_and_get() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": [{"fdcId": 1}]})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFdcClient(
        api_key="fdc-key", base_url="https://fdc.test/v1", http_client=async_client
    )

    search = asyncio.run(client.search_foods("oats", page_size=5, data_types=["SR"]))
    food = asyncio.run(client.get_food(1))
    asyncio.run(client.close())

    assert search == {"foods": [{"fdcId": 1}]}
    assert food["fdcId"] == 1
    assert requests[0].method == "POST"
    assert requests[0].url.params["api_key"] == "fdc-key"
    assert json.loads(requests[0].content) == {
        "query": "oats",
        "pageSize": 5,
        "dataType": ["SR"],
    }
    assert requests[1].url.path == "/v1/food/1"
    assert requests[1].url.params["format"] == "full"


def test_fdc_client_raises_on_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    client = HttpxFdcClient(
        api_key="fdc-key",
        base_url="https://fdc.test/v1",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_food(1))


def test_supabase_sign_in_maps_session() -> None:
    auth = _FakeAuth(_auth_session())
    provider = SupabaseIdentityProvider(client=SimpleNamespace(auth=auth))

    session = provider.sign_in("alex@example.com", "s3cret!")

    assert session.subject == "user-1"
    assert session.access_token == "access"
    assert session.expires_at == 1700000000
    assert auth.calls == [
        (
            "sign_in_with_password",
            {"email": "alex@example.com", "password": "s3cret!"},
        )
    ]


def test_supabase_sign_up_reports_pending_confirmation() -> None:
    auth = _FakeAuth(session=None)
    provider = SupabaseIdentityProvider(client=SimpleNamespace(auth=auth))

    result = provider.sign_up("alex@example.com", "s3cret!", {"name": "Alex"})

    assert result.subject == "user-1"
    assert result.confirmation_required
    assert auth.calls[0][1]["options"] == {"data": {"name": "Alex"}}


def test_supabase_confirm_without_session_fails() -> None:
    provider = SupabaseIdentityProvider(
        client=SimpleNamespace(auth=_FakeAuth(session=None))
    )

    with pytest.raises(RuntimeError):
        provider.confirm_sign_up("alex@example.com", "123456")


def test_supabase_new_password_verifies_recovery_code() -> None:
    auth = _FakeAuth(_auth_session())
    provider = SupabaseIdentityProvider(client=SimpleNamespace(auth=auth))

    provider.confirm_new_password("alex@example.com", "654321", "new-pass")

    assert [name for name, _ in auth.calls] == ["verify_otp", "update_user"]
    assert auth.calls[0][1]["type"] == "recovery"
    assert auth.calls[1][1] == {"password": "new-pass"}
