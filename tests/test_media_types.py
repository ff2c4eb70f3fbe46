from dataclasses import replace

from studyreflect.models.media import MediaKind
from studyreflect.services.media_types import classify, extension_of, is_transcribable


def test_extension_is_lowercased():
    assert extension_of("Talk.MOV") == ".mov"
    assert extension_of("no_extension") == ""
    assert extension_of(None) == ""


def test_classify_by_extension(settings):
    assert classify("sample.mp3", settings) is MediaKind.AUDIO
    assert classify("voice.AMR", settings) is MediaKind.AUDIO
    assert classify("sample.mp4", settings) is MediaKind.VIDEO
    assert classify("screen.webm", settings) is MediaKind.VIDEO
    assert classify("diagram.png", settings) is MediaKind.IMAGE
    assert classify("notes.txt", settings) is MediaKind.UNSUPPORTED
    assert classify("", settings) is MediaKind.UNSUPPORTED


def test_classification_follows_configured_lists(settings):
    narrowed = replace(settings, video_extensions=(".mp4",))
    assert classify("clip.mkv", narrowed) is MediaKind.UNSUPPORTED


def test_only_audio_and_video_are_transcribable():
    assert is_transcribable(MediaKind.AUDIO)
    assert is_transcribable(MediaKind.VIDEO)
    assert not is_transcribable(MediaKind.IMAGE)
    assert not is_transcribable(MediaKind.UNSUPPORTED)
