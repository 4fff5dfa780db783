"""Tests for translation providers."""

from __future__ import annotations

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from ru2kk.errors import TranslationProviderConfigurationError, TranslationProviderError
from ru2kk.providers import (
    EchoTranslationProvider,
    GoogleWebTranslationProvider,
    build_provider,
    extract_translation,
)
from ru2kk.structures import Outcome, PipelineOptions

ENDPOINT_PATH = "/translate_a/single"


async def start_server(handler) -> TestServer:
    app = web.Application()
    app.router.add_get(ENDPOINT_PATH, handler)
    server = TestServer(app)
    await server.start_server()
    return server


def options_for(server: TestServer, **overrides) -> PipelineOptions:
    return PipelineOptions(endpoint=str(server.make_url(ENDPOINT_PATH)), **overrides)


class TestExtractTranslation:
    """Tests for extract_translation()."""

    def test_concatenates_segments_in_order(self):
        payload = [[["Сәлем, ", "Привет, ", None], ["дүние!", "мир!", None]], None, "ru"]
        assert extract_translation(payload) == "Сәлем, дүние!"

    def test_nonconforming_segments_contribute_nothing(self):
        payload = [[["Бір", "Один"], None, [], [None, "x"], "raw", ["екі"]]]
        assert extract_translation(payload) == "Бірекі"

    def test_empty_segment_list(self):
        assert extract_translation([[], None]) == ""

    @pytest.mark.parametrize("payload", [None, {}, [], "text", [None], [{"a": 1}]])
    def test_malformed_payload(self, payload):
        with pytest.raises(TranslationProviderError):
            extract_translation(payload)


class TestGoogleWebTranslationProvider:
    """Tests for GoogleWebTranslationProvider against a local server."""

    @pytest.mark.asyncio
    async def test_successful_translation_and_query(self):
        seen = {}

        async def handler(request):
            seen.update(request.query)
            seen["user-agent"] = request.headers.get("User-Agent")
            return web.json_response([[["Сәлем, дүние!", request.query["q"], None]]])

        server = await start_server(handler)
        try:
            async with GoogleWebTranslationProvider(options_for(server)) as provider:
                result = await provider.translate("Привет, мир!")
        finally:
            await server.close()

        assert result.text == "Сәлем, дүние!"
        assert result.outcome is Outcome.TRANSLATED
        assert seen["client"] == "gtx"
        assert seen["sl"] == "ru"
        assert seen["tl"] == "kk"
        assert seen["dt"] == "t"
        assert seen["q"] == "Привет, мир!"
        assert seen["user-agent"] == "Mozilla/5.0"

    @pytest.mark.asyncio
    async def test_non_2xx_falls_back(self):
        async def handler(request):
            return web.Response(status=429, text="Too many requests")

        server = await start_server(handler)
        try:
            async with GoogleWebTranslationProvider(options_for(server)) as provider:
                result = await provider.translate("Привет")
        finally:
            await server.close()

        assert result.text == "Привет"
        assert result.fell_back
        assert result.reason == "HTTP 429"

    @pytest.mark.asyncio
    async def test_invalid_json_falls_back(self):
        async def handler(request):
            return web.Response(text="<html>not json</html>", content_type="text/html")

        server = await start_server(handler)
        try:
            async with GoogleWebTranslationProvider(options_for(server)) as provider:
                result = await provider.translate("Привет")
        finally:
            await server.close()

        assert result.text == "Привет"
        assert result.fell_back
        assert result.reason.startswith("invalid JSON")

    @pytest.mark.asyncio
    async def test_unexpected_shape_falls_back(self):
        async def handler(request):
            return web.json_response({"translation": "Сәлем"})

        server = await start_server(handler)
        try:
            async with GoogleWebTranslationProvider(options_for(server)) as provider:
                result = await provider.translate("Привет")
        finally:
            await server.close()

        assert result.text == "Привет"
        assert result.fell_back

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        async def handler(request):
            await asyncio.sleep(0.5)
            return web.json_response([[["late", "Привет"]]])

        server = await start_server(handler)
        try:
            provider = GoogleWebTranslationProvider(options_for(server, timeout_seconds=0.05))
            async with provider:
                result = await provider.translate("Привет")
        finally:
            await server.close()

        assert result.text == "Привет"
        assert result.fell_back
        assert "timed out" in result.reason

    @pytest.mark.asyncio
    async def test_network_error_falls_back(self):
        options = PipelineOptions(endpoint="http://127.0.0.1:1/translate_a/single")
        async with GoogleWebTranslationProvider(options) as provider:
            result = await provider.translate("Привет")

        assert result.text == "Привет"
        assert result.fell_back
        assert result.reason.startswith("network error")

    @pytest.mark.asyncio
    async def test_empty_text_skips_network(self):
        options = PipelineOptions(endpoint="http://127.0.0.1:1/translate_a/single")
        async with GoogleWebTranslationProvider(options) as provider:
            result = await provider.translate("")

        assert result.text == ""
        assert result.translated

    @pytest.mark.asyncio
    async def test_debug_output_goes_to_stderr(self, capsys):
        async def handler(request):
            return web.json_response([[["Сәлем", "Привет"]]])

        server = await start_server(handler)
        try:
            async with GoogleWebTranslationProvider(options_for(server), debug=True) as provider:
                await provider.translate("Привет")
        finally:
            await server.close()

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "[ru2kk][provider-debug] provider.request.params" in captured.err

    @pytest.mark.asyncio
    async def test_aclose_releases_owned_session(self):
        provider = GoogleWebTranslationProvider()
        async with provider:
            session = provider._session
            assert session is not None
        assert session.closed
        assert provider._session is None

    def test_build_params_use_configured_languages(self):
        provider = GoogleWebTranslationProvider(
            PipelineOptions(source_language="ru", target_language="kk")
        )
        assert provider.build_params("да") == {
            "client": "gtx",
            "sl": "ru",
            "tl": "kk",
            "dt": "t",
            "q": "да",
        }


class TestBuildProvider:
    """Tests for build_provider()."""

    def test_default_is_google(self):
        assert isinstance(build_provider(None), GoogleWebTranslationProvider)
        assert isinstance(build_provider(" GTX "), GoogleWebTranslationProvider)

    def test_echo(self):
        assert isinstance(build_provider("mock"), EchoTranslationProvider)

    def test_options_are_passed_through(self):
        options = PipelineOptions(timeout_seconds=3)
        provider = build_provider("google", options, debug=True)
        assert provider.options is options
        assert provider.debug

    def test_unknown_provider(self):
        with pytest.raises(TranslationProviderConfigurationError):
            build_provider("deepl")

    @pytest.mark.asyncio
    async def test_echo_returns_input(self):
        async with EchoTranslationProvider() as provider:
            result = await provider.translate("Привет")
        assert result.text == "Привет"
        assert result.translated
