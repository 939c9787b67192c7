"""
Unit tests for the GitHub and Copilot API clients.
"""

import json

import httpx
import pytest

from wacky_pm.clients.github_client import GitHubClient
from wacky_pm.copilot.llm_client import CopilotIdeaGenerator
from wacky_pm.core.exceptions import ExternalApiError, GeneratorError, IssueCreationError


def github_client(handler) -> GitHubClient:
    return GitHubClient(
        base_url="https://api.github.test",
        timeout=5,
        public_keys_path="/meta/public_keys/copilot_api",
        transport=httpx.MockTransport(handler),
    )


def generator(handler) -> CopilotIdeaGenerator:
    return CopilotIdeaGenerator(
        api_url="https://copilot.test",
        model="gpt-test",
        system_prompt="Be wacky.",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_login_sends_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"login": "alice"})

    async with github_client(handler) as client:
        assert await client.get_login("token-alice") == "alice"

    assert seen[0].url.path == "/user"
    assert seen[0].headers["Authorization"] == "Bearer token-alice"


@pytest.mark.asyncio
async def test_get_login_maps_http_errors() -> None:
    client = github_client(lambda request: httpx.Response(401, text="Bad credentials"))

    with pytest.raises(ExternalApiError) as exc_info:
        await client.get_login("expired")

    assert exc_info.value.code == "EXTERNAL_API_FAILURE"
    assert exc_info.value.details["status_code"] == 401
    await client.close()


@pytest.mark.asyncio
async def test_get_retries_transport_errors() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            200,
            json={
                "public_keys": [
                    {"key_identifier": "key-1", "key": "PEM", "is_current": True},
                    {"key_identifier": "broken"},
                ]
            },
        )

    async with github_client(handler) as client:
        keys = await client.get_public_keys("")

    assert calls == 2
    assert [key.key_identifier for key in keys] == ["key-1"]
    assert keys[0].is_current


@pytest.mark.asyncio
async def test_create_issue_posts_once() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            201,
            json={"number": 7, "html_url": "https://github.com/acme/widgets/issues/7"},
        )

    async with github_client(handler) as client:
        issue = await client.create_issue(
            "token-alice", "acme", "widgets", "Title", "Body", labels=["wacky"]
        )

    assert (issue.number, issue.repository) == (7, "acme/widgets")
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/repos/acme/widgets/issues"
    assert json.loads(requests[0].content) == {"title": "Title", "body": "Body", "labels": ["wacky"]}


@pytest.mark.asyncio
async def test_create_issue_is_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection reset", request=request)

    client = github_client(handler)
    with pytest.raises(IssueCreationError) as exc_info:
        await client.create_issue("token-alice", "acme", "widgets", "Title", "Body")

    assert calls == 1
    assert exc_info.value.details["repository"] == "acme/widgets"
    await client.close()


@pytest.mark.asyncio
async def test_generate_returns_completion_text() -> None:
    sent: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "id": "cmpl-1",
                "model": "gpt-test",
                "choices": [{"message": {"role": "assistant", "content": "  Socks that text you  "}}],
                "usage": {"total_tokens": 12},
            },
        )

    async with generator(handler) as client:
        result = await client.generate("Give me an idea", "token-alice")

    assert result.content == "Socks that text you"
    assert result.request_id == "cmpl-1"
    assert sent[0]["stream"] is False
    assert sent[0]["messages"] == [
        {"role": "system", "content": "Be wacky."},
        {"role": "user", "content": "Give me an idea"},
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="upstream exploded"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"choices": [{"message": {"content": "   "}}]}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_generate_failures_raise_generator_error(response: httpx.Response) -> None:
    client = generator(lambda request: response)

    with pytest.raises(GeneratorError) as exc_info:
        await client.generate("Give me an idea", "token-alice")

    assert exc_info.value.code == "GENERATOR_FAILURE"
    await client.close()
