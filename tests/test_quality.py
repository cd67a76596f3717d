from naoload.services.resolver.quality import (
    Rendition,
    quality_rank,
    rendition_from_dict,
    select_best_rendition,
)


def test_muxed_720p_beats_video_only_1080p():
    candidates = [
        Rendition(url="https://cdn/720.mp4", quality="720p"),
        Rendition(url="https://cdn/1080.mp4", quality="1080p", has_audio=False),
    ]
    assert select_best_rendition(candidates).url == "https://cdn/720.mp4"


def test_highest_rank_wins_among_muxed():
    candidates = [
        Rendition(url="https://cdn/480.mp4", quality="480p"),
        Rendition(url="https://cdn/1080.mp4", quality="1080p"),
        Rendition(url="https://cdn/720.mp4", quality="720p"),
    ]
    assert select_best_rendition(candidates).quality == "1080p"


def test_ties_keep_input_order():
    candidates = [
        Rendition(url="https://cdn/a.mp4", quality="HD"),
        Rendition(url="https://cdn/b.mp4", quality="720p"),
    ]
    assert select_best_rendition(candidates).url == "https://cdn/a.mp4"


def test_empty_candidates():
    assert select_best_rendition([]) is None


def test_quality_rank_labels():
    assert quality_rank("2160p") == 8
    assert quality_rank("HD") == 5
    assert quality_rank("mp4 (720p)") == 5
    assert quality_rank("sd") == 3
    assert quality_rank("weird") == 0
    assert quality_rank(None) == 0


def test_rendition_from_dict_reads_codec_markers():
    rendition = rendition_from_dict({"url": "https://cdn/v.mp4", "height": 1080, "acodec": "none"})
    assert rendition.quality == "1080p"
    assert rendition.has_video
    assert not rendition.has_audio


def test_rendition_from_dict_audio_type():
    rendition = rendition_from_dict({"link": "https://cdn/a.m4a", "type": "audio"})
    assert rendition.has_audio
    assert not rendition.has_video


def test_rendition_from_dict_without_url():
    assert rendition_from_dict({"quality": "720p"}) is None
