import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest

from naoload.core.config import Config
from naoload.services.resolver.backends import (
    AllInOneBackend,
    AudioConvertBackend,
    CobaltBackend,
    FreeBackend,
    build_backends,
    supports,
)
from naoload.services.resolver.errors import BackendError, BackendTimeout
from naoload.services.resolver.platforms import Platform
from naoload.services.resolver.result import MediaResult
from naoload.services.resolver.rules import ExtractionRule

from conftest import FakeResponse, FakeSession


TIKTOK_URL = "https://www.tiktok.com/@someone/video/7234567890123456789"
YOUTUBE_URL = "https://youtu.be/dQw4w9WgXcQ"


def run(coro):
    return asyncio.run(coro)


# =============================================================================
# Cobalt
# =============================================================================

class TestCobalt:

    def test_falls_back_through_instances_in_order(self):
        session = FakeSession([
            FakeResponse(400, {"status": "error", "error": {"code": "error.api.link.invalid"}}),
            aiohttp.ClientConnectionError("refused"),
            FakeResponse(200, {"status": "redirect", "url": "https://cdn/v.mp4", "filename": "v.mp4"}),
        ])
        backend = CobaltBackend(["https://a.example", "https://b.example/", "https://c.example"], session)

        result = run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

        assert result.status == "redirect"
        assert result.url == "https://cdn/v.mp4"
        assert result.filename == "v.mp4"
        assert session.urls == ["https://a.example/", "https://b.example/", "https://c.example/"]

    def test_first_success_stops_iteration(self):
        session = FakeSession([
            FakeResponse(200, {"status": "tunnel", "url": "https://a.example/tunnel?id=1"}),
        ])
        backend = CobaltBackend(["https://a.example", "https://b.example"], session)

        result = run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

        assert result.url == "https://a.example/tunnel?id=1"
        assert len(session.calls) == 1

    def test_all_instances_failing_raises_last_error(self):
        session = FakeSession([
            FakeResponse(500, text="upstream down"),
            FakeResponse(200, {"status": "error", "error": {"code": "error.api.fetch.fail"}}),
        ])
        backend = CobaltBackend(["https://a.example", "https://b.example"], session)

        with pytest.raises(BackendError) as exc_info:
            run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

        assert exc_info.value.code == "COBALT_ERROR"
        assert "error.api.fetch.fail" in exc_info.value.message

    @pytest.mark.parametrize("payload", [
        {"status": ["redirect"]},
        {"status": {"kind": "redirect"}},
        {"status": "redirect", "url": ["https://cdn/v.mp4"]},
        {"status": "picker", "picker": {"url": "https://i/1.jpg"}},
    ])
    def test_malformed_payload_is_backend_error(self, payload):
        backend = CobaltBackend(["https://a.example"], FakeSession([FakeResponse(200, payload)]))
        with pytest.raises(BackendError) as exc_info:
            run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.code == "COBALT_ERROR"

    def test_no_instances(self):
        backend = CobaltBackend([], FakeSession())
        with pytest.raises(BackendError) as exc_info:
            run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.code == "NO_INSTANCE"

    def test_picker_items_are_normalized(self):
        session = FakeSession([
            FakeResponse(200, {
                "status": "picker",
                "picker": [
                    {"type": "photo", "url": "https://i/1.jpg", "thumb": "https://t/1.jpg"},
                    {"type": "video", "url": "https://v/2.mp4"},
                    {"type": "video"},
                ],
            }),
        ])
        backend = CobaltBackend(["https://a.example"], session)

        result = run(backend.resolve("https://www.instagram.com/p/B1a2c3/", None, "video", Platform.INSTAGRAM))

        assert result.status == "picker"
        assert [item.type for item in result.picker] == ["image", "video"]
        assert result.picker[0].thumbnail == "https://t/1.jpg"

    def test_audio_request_body_and_auth_header(self):
        session = FakeSession([
            FakeResponse(200, {"status": "redirect", "url": "https://cdn/a.mp3"}),
        ])
        backend = CobaltBackend(["https://a.example"], session, api_key="k-123", video_quality=720)

        run(backend.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))

        call = session.calls[0]
        assert call.method == "POST"
        assert call.kwargs["json"] == {
            "url": YOUTUBE_URL,
            "downloadMode": "audio",
            "videoQuality": "720",
            "filenameStyle": "pretty",
        }
        assert call.kwargs["headers"]["Authorization"] == "Api-Key k-123"


# =============================================================================
# Audio Conversion
# =============================================================================

class TestAudioConvert:

    def make(self, session, attempts=30, sleep=None):
        return AudioConvertBackend(
            api_key="key",
            host="audio.example",
            http=session,
            attempts=attempts,
            interval=1.0,
            sleep=sleep or AsyncMock(),
        )

    def test_polls_status_url_until_link_appears(self):
        processing = {"status": "processing", "msg": "in queue"}
        session = FakeSession(
            [FakeResponse(200, {"status": "processing", "status_url": "https://audio.example/status/1"})]
            + [FakeResponse(200, processing) for _ in range(5)]
            + [FakeResponse(200, {"status": "ok", "link": "https://cdn/a.mp3", "title": "Song"})]
        )
        sleep = AsyncMock()
        backend = self.make(session, sleep=sleep)

        result = run(backend.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))

        assert result.url == "https://cdn/a.mp3"
        assert result.title == "Song"
        assert session.urls[0] == "https://audio.example/dl?id=dQw4w9WgXcQ"
        assert session.urls[1:] == ["https://audio.example/status/1"] * 6
        assert sleep.await_count == 5

    def test_immediate_link_skips_polling(self):
        session = FakeSession([FakeResponse(200, {"status": "ok", "link": "https://cdn/a.mp3"})])
        sleep = AsyncMock()
        backend = self.make(session, sleep=sleep)

        result = run(backend.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))

        assert result.url == "https://cdn/a.mp3"
        assert len(session.calls) == 1
        sleep.assert_not_awaited()

    def test_failed_status_raises(self):
        session = FakeSession([FakeResponse(200, {"status": "fail", "msg": "Video too long"})])
        backend = self.make(session)

        with pytest.raises(BackendError, match="Video too long"):
            run(backend.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))

    def test_times_out(self):
        session = FakeSession([FakeResponse(200, {"status": "processing"}) for _ in range(4)])
        sleep = AsyncMock()
        backend = self.make(session, attempts=3, sleep=sleep)

        with pytest.raises(BackendTimeout):
            run(backend.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))

        assert sleep.await_count == 2

    def test_requires_identifier_and_key(self):
        with pytest.raises(BackendError) as exc_info:
            run(self.make(FakeSession()).resolve(YOUTUBE_URL, None, "audio", Platform.YOUTUBE))
        assert exc_info.value.code == "MISSING_IDENTIFIER"

        keyless = AudioConvertBackend(api_key="", host="audio.example", http=FakeSession())
        with pytest.raises(BackendError) as exc_info:
            run(keyless.resolve(YOUTUBE_URL, "dQw4w9WgXcQ", "audio", Platform.YOUTUBE))
        assert exc_info.value.code == "API_KEY_MISSING"

    def test_only_takes_youtube_audio(self):
        backend = self.make(FakeSession())
        assert supports(backend, Platform.YOUTUBE_MUSIC, "audio")
        assert not supports(backend, Platform.YOUTUBE, "video")
        assert not supports(backend, Platform.TIKTOK, "audio")
        assert not supports(backend, Platform.UNKNOWN, "audio")


# =============================================================================
# All-in-One
# =============================================================================

class TestAllInOne:

    FINISHED = {
        "status": "Success",
        "media_result": [{"download_url": "https://cdn/v.mp4", "media_type": "HD"}],
        "audio_url": "https://cdn/a.mp3",
    }

    def make(self, session, sleep=None):
        return AllInOneBackend(
            api_key="key",
            host="aio.example",
            http=session,
            attempts=5,
            interval=1.0,
            sleep=sleep or AsyncMock(),
        )

    def test_polls_until_success(self):
        session = FakeSession([
            FakeResponse(200, {"status": "Processing", "progress": 40}),
            FakeResponse(200, self.FINISHED),
        ])
        sleep = AsyncMock()

        result = run(self.make(session, sleep).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

        assert result.url == "https://cdn/v.mp4"
        assert result.quality == "HD"
        assert sleep.await_count == 1
        assert session.urls == ["https://aio.example/api/v1/download/media"] * 2
        assert session.calls[0].kwargs["json"] == {"url": TIKTOK_URL, "video_quality": 1080}
        assert session.calls[0].kwargs["headers"]["x-rapidapi-host"] == "aio.example"

    def test_audio_prefers_audio_url(self):
        session = FakeSession([FakeResponse(200, self.FINISHED)])
        result = run(self.make(session).resolve(TIKTOK_URL, None, "audio", Platform.TIKTOK))
        assert result.url == "https://cdn/a.mp3"

    def test_music_endpoint(self):
        session = FakeSession([FakeResponse(200, self.FINISHED)])
        run(self.make(session).resolve("https://music.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ", "audio", Platform.YOUTUBE_MUSIC))
        assert session.urls == ["https://aio.example/api/v1/download/music"]

    def test_error_field_raises(self):
        session = FakeSession([FakeResponse(200, {"error": True, "message": "Private video"})])
        with pytest.raises(BackendError, match="Private video"):
            run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

    def test_http_error_forwards_status(self):
        session = FakeSession([FakeResponse(403, {"message": "You are not subscribed to this API."})])
        with pytest.raises(BackendError) as exc_info:
            run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.http_status == 403

    @pytest.mark.parametrize("media", [{"x": 1}, "https://cdn/v.mp4", [["https://cdn/v.mp4"]]])
    def test_malformed_media_result_is_backend_error(self, media):
        session = FakeSession([FakeResponse(200, {"status": "Success", "media_result": media})])
        with pytest.raises(BackendError) as exc_info:
            run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.code == "NO_MEDIA"
        assert len(session.calls) == 1

    def test_audio_only_job_marks_audio_delivery(self):
        session = FakeSession([FakeResponse(200, {"status": "Success", "media_result": [], "audio_url": "https://cdn/a.mp3"})])
        result = run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert result.url == "https://cdn/a.mp3"
        assert result.media_kind == "audio"

    def test_non_string_message_is_kept_readable(self):
        session = FakeSession([FakeResponse(200, {"error": True, "message": {"detail": "Private video"}})])
        with pytest.raises(BackendError, match="Private video"):
            run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))

    def test_network_timeout_becomes_backend_error(self):
        session = FakeSession([asyncio.TimeoutError()])
        with pytest.raises(BackendError) as exc_info:
            run(self.make(session).resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.code == "UPSTREAM_TIMEOUT"


# =============================================================================
# Keyless Endpoint
# =============================================================================

class TestFree:

    def resolve(self, payload=None, kind="video", url=TIKTOK_URL, text=None, rules=None):
        session = FakeSession([FakeResponse(200, payload, text=text)])
        kwargs = {"rules": rules} if rules else {}
        backend = FreeBackend("https://free.example/api", session, **kwargs)
        result = run(backend.resolve(url, None, kind, Platform.TIKTOK))
        return result, session

    def test_sends_url_as_query_param(self):
        _, session = self.resolve({"play": "https://cdn/v.mp4"})
        assert session.calls[0].method == "GET"
        assert session.calls[0].url == "https://free.example/api"
        assert session.calls[0].kwargs["params"] == {"url": TIKTOK_URL}

    def test_direct_link_inside_envelope(self):
        result, _ = self.resolve({"code": 0, "data": {"play": "https://cdn/nowm.mp4", "title": "Clip"}})
        assert result.url == "https://cdn/nowm.mp4"
        assert result.title == "Clip"

    def test_echoed_source_url_is_ignored(self):
        result, _ = self.resolve({
            "url": TIKTOK_URL,
            "links": [
                {"url": "https://cdn/720.mp4", "quality": "720p"},
                {"url": "https://cdn/1080.mp4", "quality": "1080p", "hasAudio": False},
            ],
        })
        assert result.url == "https://cdn/720.mp4"
        assert result.quality == "720p"

    def test_audio_keys_first_for_audio(self):
        result, _ = self.resolve({"play": "https://cdn/v.mp4", "music": "https://cdn/a.mp3"}, kind="audio")
        assert result.url == "https://cdn/a.mp3"

    def test_multiple_medias_become_picker(self):
        result, _ = self.resolve({"medias": [{"url": "https://i/1.jpg"}, {"url": "https://i/2.jpg"}]})
        assert result.status == "picker"
        assert [item.type for item in result.picker] == ["image", "image"]

    def test_carousel_images(self):
        result, _ = self.resolve({"result": {"images": ["https://i/1.jpg", "https://i/2.webp"]}})
        assert result.status == "picker"
        assert len(result.picker) == 2

    def test_unrecognized_payload_is_error_result(self):
        result, _ = self.resolve({"foo": "bar"})
        assert result.status == "error"
        assert result.error["code"] == "UNRECOGNIZED_RESPONSE"
        assert '"foo"' in result.error["message"]
        assert result.http_status == 502

    def test_non_json_body(self):
        result, _ = self.resolve(text="<html>blocked</html>")
        assert result.error["code"] == "UNRECOGNIZED_RESPONSE"
        assert "<html>blocked</html>" in result.error["message"]

    def test_custom_rules(self):
        rule = ExtractionRule(
            "nested",
            lambda doc, kind, source: MediaResult.redirect(doc["video"]["src"]) if isinstance(doc.get("video"), dict) else None,
        )
        result, _ = self.resolve({"video": {"src": "https://cdn/custom.mp4"}}, rules=(rule,))
        assert result.url == "https://cdn/custom.mp4"

    def test_http_error_raises(self):
        session = FakeSession([FakeResponse(502, text="bad gateway")])
        backend = FreeBackend("https://free.example/api", session)
        with pytest.raises(BackendError) as exc_info:
            run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.http_status == 502

    def test_missing_endpoint(self):
        backend = FreeBackend("", FakeSession())
        with pytest.raises(BackendError) as exc_info:
            run(backend.resolve(TIKTOK_URL, None, "video", Platform.TIKTOK))
        assert exc_info.value.code == "ENDPOINT_MISSING"


# =============================================================================
# Registry
# =============================================================================

def test_build_backends_skips_unknown_names():
    config = Config(BACKENDS=("cobalt", "bogus", "FREE", "audio"), DATABASE_PATH="")
    backends = build_backends(config, FakeSession())
    assert [backend.name for backend in backends] == ["cobalt", "free", "audio"]
