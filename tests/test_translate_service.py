import asyncio

import httpx
import pytest

from menuku.services.translate_service import (
    TranslationError,
    parse_translation_payload,
    translate_en_to_id,
    translate_id_to_en,
    translate_text,
)


def _run_with_handler(handler, coroutine_factory):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coroutine_factory(client)

    return asyncio.run(_run())


def test_translate_builds_query_and_joins_fragments():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        payload = [
            [["Fried rice ", "Nasi goreng ", None, None, 10], ["with egg", "pakai telur", None, None, 10]],
            None,
            "id",
        ]
        return httpx.Response(200, json=payload)

    translated = _run_with_handler(
        handler, lambda client: translate_text("Nasi goreng pakai telur", "id", "en", client=client)
    )

    assert translated == "Fried rice with egg"
    assert seen["sl"] == "id"
    assert seen["tl"] == "en"
    assert seen["client"] == "gtx"
    assert seen["dt"] == "t"
    assert seen["q"] == "Nasi goreng pakai telur"


def test_direction_helpers_swap_languages():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.params["sl"], request.url.params["tl"]))
        return httpx.Response(200, json=[[["ok", "ok"]]])

    _run_with_handler(handler, lambda client: translate_id_to_en("Sate", client=client))
    _run_with_handler(handler, lambda client: translate_en_to_id("Satay", client=client))

    assert seen == [("id", "en"), ("en", "id")]


def test_blank_text_skips_the_request():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("no request expected")

    assert _run_with_handler(handler, lambda client: translate_text("   ", client=client)) == ""


def test_non_200_response_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(TranslationError):
        _run_with_handler(handler, lambda client: translate_text("Nasi Goreng", client=client))


def test_non_json_body_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>blocked</html>")

    with pytest.raises(TranslationError):
        _run_with_handler(handler, lambda client: translate_text("Nasi Goreng", client=client))


def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    with pytest.raises(TranslationError):
        _run_with_handler(handler, lambda client: translate_text("Nasi Goreng", client=client))


def test_payload_without_fragments_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(TranslationError):
        _run_with_handler(handler, lambda client: translate_text("Es Teh", client=client))


def test_parse_translation_payload_skips_malformed_fragments():
    payload = [[["Iced ", "Es "], [None, "x"], "junk", [], ["tea", "teh"]]]

    assert parse_translation_payload(payload) == "Iced tea"
    assert parse_translation_payload([]) is None
    assert parse_translation_payload([None]) is None
