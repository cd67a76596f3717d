import pytest

from naoload.services.resolver.result import MediaResult, PickerItem, build_filename


def test_redirect_requires_url():
    with pytest.raises(ValueError):
        MediaResult(status="redirect")


def test_status_must_match_payload():
    with pytest.raises(ValueError):
        MediaResult(status="picker", url="https://cdn/v.mp4")


def test_only_one_payload_allowed():
    with pytest.raises(ValueError):
        MediaResult(status="redirect", url="https://cdn/v.mp4", error={"code": "X"})


def test_picker_needs_items():
    with pytest.raises(ValueError):
        MediaResult.choices([])


def test_to_dict_omits_unset_fields_and_status_hint():
    result = MediaResult.failure("TIMEOUT", "Download timed out.", http_status=504)
    assert result.to_dict() == {
        "status": "error",
        "error": {"code": "TIMEOUT", "message": "Download timed out."},
    }
    assert not result.ok


def test_picker_serialization():
    result = MediaResult.choices([
        PickerItem(url="https://i/1.jpg", type="photo", thumbnail="https://t/1.jpg"),
        PickerItem(url="https://v/2.mp4", type="gif"),
    ])
    assert result.to_dict()["picker"] == [
        {"url": "https://i/1.jpg", "type": "image", "thumbnail": "https://t/1.jpg"},
        {"url": "https://v/2.mp4", "type": "video"},
    ]


def test_build_filename():
    assert build_filename("tiktok", "audio", now=1700000000.5) == "naoload_tiktok_1700000000500.mp3"
    assert build_filename("youtube", "video", now=1700000000.5) == "naoload_youtube_1700000000500.mp4"
