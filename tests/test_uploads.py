import io

import pytest

from studyreflect.exceptions import PayloadTooLarge
from studyreflect.services.size_policy import SizePolicy
from studyreflect.services.uploads import ScratchFiles, save_upload, unique_upload_name


def test_unique_upload_name_keeps_extension():
    a = unique_upload_name("Lecture.MP3")
    b = unique_upload_name("Lecture.MP3")
    assert a.startswith("file-")
    assert a.endswith(".mp3")
    assert a != b


def test_save_upload_streams_to_tracked_file(tmp_path):
    policy = SizePolicy(upload_limit_bytes=1000, compress_threshold_bytes=1000)
    scratch = ScratchFiles()

    stored = save_upload(
        io.BytesIO(b"x" * 600),
        filename="memo.wav",
        content_type="audio/wav",
        upload_dir=tmp_path / "uploads",
        policy=policy,
        scratch=scratch,
    )

    assert stored.size_bytes == 600
    assert stored.path.read_bytes() == b"x" * 600
    assert stored.filename == "memo.wav"
    assert scratch.paths == [stored.path]

    scratch.cleanup()
    assert not stored.path.exists()


def test_save_upload_rejects_undeclared_oversize_body(tmp_path):
    policy = SizePolicy(upload_limit_bytes=1000, compress_threshold_bytes=1000)
    upload_dir = tmp_path / "uploads"

    with pytest.raises(PayloadTooLarge):
        with ScratchFiles() as scratch:
            save_upload(
                io.BytesIO(b"x" * 1001),
                filename="big.wav",
                content_type=None,
                upload_dir=upload_dir,
                policy=policy,
                scratch=scratch,
            )

    assert list(upload_dir.iterdir()) == []


def test_scratch_cleanup_tolerates_missing_files(tmp_path):
    kept = tmp_path / "a.wav"
    kept.write_bytes(b"1")
    gone = tmp_path / "b.wav"

    scratch = ScratchFiles()
    scratch.track(kept)
    scratch.track(gone)
    scratch.track(kept)

    assert scratch.paths == [kept, gone]
    assert scratch.cleanup() == [kept]
    assert scratch.paths == []
