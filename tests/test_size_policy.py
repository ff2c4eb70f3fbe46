import pytest

from studyreflect.core.config import MB
from studyreflect.exceptions import PayloadTooLarge
from studyreflect.services.size_policy import SizeDecision, SizePolicy, format_megabytes


def test_format_megabytes():
    assert format_megabytes(10 * MB) == "10MB"
    assert format_megabytes(4 * MB) == "4MB"
    assert format_megabytes(int(1.5 * MB)) == "1.5MB"


def test_upload_decisions():
    policy = SizePolicy(upload_limit_bytes=10 * MB, compress_threshold_bytes=24 * MB)
    assert policy.check_upload(10 * MB) is SizeDecision.PASS_THROUGH
    assert policy.check_upload(10 * MB + 1) is SizeDecision.REJECT
    assert policy.check_upload(None) is SizeDecision.PASS_THROUGH


def test_audio_decisions():
    policy = SizePolicy(upload_limit_bytes=100 * MB, compress_threshold_bytes=24 * MB)
    assert policy.check_audio(24 * MB) is SizeDecision.PASS_THROUGH
    assert policy.check_audio(28 * MB) is SizeDecision.COMPRESS


def test_enforce_upload_raises_with_limit():
    policy = SizePolicy(upload_limit_bytes=10 * MB, compress_threshold_bytes=24 * MB)
    with pytest.raises(PayloadTooLarge) as ei:
        policy.enforce_upload(30 * MB)

    err = ei.value
    assert err.status_code == 413
    assert err.to_payload()["maxSize"] == "10MB"
    assert "compressing" in err.to_payload()["message"]


def test_policy_from_settings(settings):
    policy = SizePolicy.from_settings(settings)
    assert policy.upload_limit_bytes == settings.upload_limit_bytes
    assert policy.compress_threshold_bytes == settings.compress_threshold_bytes
