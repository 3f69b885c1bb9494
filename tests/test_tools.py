"""
Tests for the check_domains_availability tool and the tool server.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from grove_domain_check.checker import AvailabilityResult
from grove_domain_check.errors import ServerNotRunningError, ToolArgumentError, ToolNotFoundError
from grove_domain_check.server import DomainCheckServer
from grove_domain_check.tools import (
    CHECK_DOMAINS_TOOL,
    INVALID_INPUT_TEXT,
    CheckDomainsArgs,
    format_results_text,
    handle_check_domains_availability,
    parse_domain_list,
)


def fake_verifier(results):
    verifier = MagicMock()
    verifier.verify_domains = AsyncMock(return_value=results)
    return verifier


class TestParseDomainList:
    """Tests for parse_domain_list."""

    def test_split_trim_lowercase(self):
        assert parse_domain_list(" Example.com, TEST.io ,myapp.net") == [
            "example.com", "test.io", "myapp.net",
        ]

    def test_drops_entries_without_dot(self):
        assert parse_domain_list("example.com, localhost, , foo") == ["example.com"]

    def test_dedupes_preserving_order(self):
        assert parse_domain_list("b.com, a.com, B.COM, a.com") == ["b.com", "a.com"]

    def test_caps_at_limit(self):
        raw = ",".join(f"name{i}.com" for i in range(20))
        domains = parse_domain_list(raw)

        assert len(domains) == 15
        assert domains[0] == "name0.com"
        assert domains[-1] == "name14.com"

    def test_custom_limit(self):
        assert parse_domain_list("a.com,b.com,c.com", limit=2) == ["a.com", "b.com"]


class TestCheckDomainsArgs:
    """Tests for argument validation."""

    def test_defaults(self):
        args = CheckDomainsArgs.from_dict({"domains": "a.com"})
        assert args.concurrency == 4

    def test_valid_concurrency(self):
        assert CheckDomainsArgs.from_dict({"domains": "a.com", "concurrency": 10}).concurrency == 10
        assert CheckDomainsArgs.from_dict({"domains": "a.com", "concurrency": 2.0}).concurrency == 2

    @pytest.mark.parametrize("bad", [0, 11, -1, 2.5, "4", True])
    def test_invalid_concurrency(self, bad):
        with pytest.raises(ToolArgumentError, match="concurrency"):
            CheckDomainsArgs.from_dict({"domains": "a.com", "concurrency": bad})

    @pytest.mark.parametrize("bad", [None, 42, ["a.com"]])
    def test_invalid_domains(self, bad):
        with pytest.raises(ToolArgumentError, match="domains"):
            CheckDomainsArgs.from_dict({"domains": bad})


class TestFormatResultsText:
    """Tests for the text summary."""

    def test_groups(self):
        text = format_results_text([
            AvailabilityResult(domain="free.io", can_buy=True),
            AvailabilityResult(domain="example.com", can_buy=False, fast_reject="dns"),
            AvailabilityResult(domain="slow.dev", can_buy=False, timeout=True),
            AvailabilityResult(domain="odd.net", can_buy=False, error="Unexpected RDAP status: 500"),
        ])

        assert text.startswith("Bulk check (4 domains):")
        assert "Available (1):\n✅ free.io" in text
        assert "Not Available (1):\n❌ example.com" in text
        assert "Errors/Timeouts (2):" in text
        assert "⚠️ slow.dev (timeout)" in text
        assert "⚠️ odd.net: Unexpected RDAP status: 500" in text

    def test_omits_empty_groups(self):
        text = format_results_text([AvailabilityResult(domain="free.io", can_buy=True)])

        assert "Not Available" not in text
        assert "Errors/Timeouts" not in text


class TestHandleCheckDomainsAvailability:
    """Tests for the tool handler."""

    @pytest.mark.asyncio
    async def test_invalid_input(self):
        verifier = fake_verifier([])
        response = await handle_check_domains_availability({"domains": "nothing here"}, verifier)

        assert response["content"][0]["text"] == INVALID_INPUT_TEXT
        verifier.verify_domains.assert_not_called()

    @pytest.mark.asyncio
    async def test_structured_results_in_input_order(self):
        results = [
            AvailabilityResult(domain="b.com", can_buy=False, fast_reject="dns"),
            AvailabilityResult(domain="a.io", can_buy=True),
        ]
        verifier = fake_verifier(results)

        response = await handle_check_domains_availability(
            {"domains": "B.com, a.io", "concurrency": 2}, verifier
        )

        verifier.verify_domains.assert_awaited_once_with(["b.com", "a.io"], concurrency=2)
        assert response["isError"] is False
        assert response["structuredContent"]["results"] == [
            {"domain": "b.com", "canBuy": False, "fastReject": "dns"},
            {"domain": "a.io", "canBuy": True},
        ]


class TestDomainCheckServer:
    """Tests for DomainCheckServer."""

    def test_list_tools(self):
        tools = DomainCheckServer().list_tools()

        assert tools == [CHECK_DOMAINS_TOOL.to_dict()]
        assert tools[0]["inputSchema"]["required"] == ["domains"]

    @pytest.mark.asyncio
    async def test_call_before_start(self):
        server = DomainCheckServer()

        with pytest.raises(ServerNotRunningError):
            await server.call_tool("check_domains_availability", {"domains": "a.com"})

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        server = DomainCheckServer()

        with pytest.raises(ToolNotFoundError, match="get_domain_price"):
            await server.call_tool("get_domain_price", {})

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        server = DomainCheckServer()

        assert await server.start() is True
        assert await server.start() is False
        assert server.is_running is True

        await server.stop()
        await server.stop()
        assert server.is_running is False

    @pytest.mark.asyncio
    async def test_call_tool_end_to_end(self):
        """Fake upstreams: example.com resolves, the rest are unregistered."""
        rdap_calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "cloudflare-dns.com":
                if request.url.params["name"] == "example.com":
                    return httpx.Response(200, json={"Answer": [{"data": "93.184.216.34"}]})
                return httpx.Response(200, json={"Status": 3})
            rdap_calls.append(request.url.path)
            if request.url.path.endswith("/broken.dev"):
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(404)

        server = DomainCheckServer(transport=httpx.MockTransport(handler))
        await server.start()
        try:
            response = await server.call_tool(
                "check_domains_availability",
                {"domains": "example.com, zzqxv123unlikely.io, broken.dev"},
            )
            # Second call is served from cache
            await server.call_tool(
                "check_domains_availability",
                {"domains": "zzqxv123unlikely.io"},
            )
        finally:
            await server.stop()

        assert response["structuredContent"]["results"] == [
            {"domain": "example.com", "canBuy": False, "fastReject": "dns"},
            {"domain": "zzqxv123unlikely.io", "canBuy": True},
            {"domain": "broken.dev", "canBuy": False, "error": "connection reset"},
        ]
        assert sorted(rdap_calls) == ["/domain/broken.dev", "/domain/zzqxv123unlikely.io"]
