"""Tests for the validation pipeline."""

from file_gateway.config import DEFAULT_MEDIA_TYPES, Settings
from file_gateway.conversion import UploadRequest, validate
from file_gateway.conversion.errors import (
    FileTooLarge,
    MissingFile,
    InvalidTargetFormat,
    MissingTargetFormat,
    SameFormat,
    UnsupportedType,
)


def _request(data=b"x", media_type="image/png", name="photo.png", target="jpg"):
    return UploadRequest(data=data, declared_media_type=media_type, file_name=name, target_format=target)


class TestPresence:
    def test_missing_file(self, settings):
        assert isinstance(validate(_request(data=None), settings), MissingFile)

    def test_missing_file_wins_over_everything(self, settings):
        req = _request(data=None, media_type="text/plain", target="png", name="x.png")
        assert isinstance(validate(req, settings), MissingFile)

    def test_empty_file_is_present(self, settings):
        assert validate(_request(data=b""), settings) is None

    def test_blank_target(self, settings):
        assert isinstance(validate(_request(target="  "), settings), MissingTargetFormat)

    def test_target_must_be_a_plain_token(self, settings):
        err = validate(_request(target="png; filename=x.exe"), settings)
        assert isinstance(err, InvalidTargetFormat)
        assert err.to_payload()["error"] == "invalid_target_format"

    def test_non_ascii_target(self, settings):
        assert isinstance(validate(_request(target="p\u00e9g"), settings), InvalidTargetFormat)


class TestMediaType:
    def test_outside_allow_list(self, settings):
        err = validate(_request(media_type="text/plain"), settings)
        assert isinstance(err, UnsupportedType)
        assert err.to_payload()["supportedTypes"] == list(DEFAULT_MEDIA_TYPES)

    def test_allow_list_checked_before_size(self):
        settings = Settings(max_file_size=1)
        err = validate(_request(data=b"xxxx", media_type="video/mp4"), settings)
        assert isinstance(err, UnsupportedType)

    def test_allow_list_is_configurable(self):
        settings = Settings(allowed_media_types=("image/png",))
        assert isinstance(validate(_request(media_type="image/jpeg", name="a.jpg", target="png"), settings), UnsupportedType)


class TestSize:
    def test_over_ceiling(self, settings):
        data = b"\0" * (settings.max_file_size + 1)
        err = validate(_request(data=data), settings)
        assert isinstance(err, FileTooLarge)
        assert err.max_size == 10485760

    def test_exactly_at_ceiling_passes(self, settings):
        data = b"\0" * settings.max_file_size
        assert validate(_request(data=data), settings) is None

    def test_any_allowed_type(self, settings):
        data = b"\0" * (settings.max_file_size + 1)
        for media_type in settings.allowed_media_types:
            assert isinstance(validate(_request(data=data, media_type=media_type), settings), FileTooLarge)


class TestFormatIdentity:
    def test_same_format(self, settings):
        err = validate(_request(name="report.docx", target="docx", media_type=DEFAULT_MEDIA_TYPES[-1]), settings)
        assert isinstance(err, SameFormat)

    def test_extension_is_lowercased(self, settings):
        assert isinstance(validate(_request(name="PHOTO.PNG", target="png"), settings), SameFormat)

    def test_jpg_to_jpeg_is_not_same_format(self, settings):
        assert validate(_request(name="a.jpg", media_type="image/jpeg", target="jpeg"), settings) is None


def test_deterministic(settings):
    req = _request(media_type="application/zip")
    first, second = validate(req, settings), validate(req, settings)
    assert type(first) is type(second)
    assert first.to_payload() == second.to_payload()
