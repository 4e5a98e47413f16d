"""Tests for the conversion dispatcher."""

import asyncio
import logging

import pytest

from file_gateway.config import Settings
from file_gateway.conversion import (
    ConversionFailure,
    ConversionService,
    ConversionSuccess,
    UploadRequest,
)
from file_gateway.conversion.adapters import PillowImageCodec
from file_gateway.conversion.errors import ConversionFailed, ConversionTimeout

from fakes import FailingDocumentCodec, FakeDocumentCodec, FakeImageCodec, SlowImageCodec

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _convert(service, **kwargs):
    fields = {"data": b"bytes", "declared_media_type": "image/jpeg", "file_name": "cat.jpg", "target_format": "png"}
    fields.update(kwargs)
    return asyncio.run(service.convert(UploadRequest(**fields)))


def _kind(outcome):
    assert isinstance(outcome, ConversionFailure)
    return outcome.kind


class TestRejections:
    def test_missing_file(self, service):
        assert _kind(_convert(service, data=None)) == "MissingFile"

    def test_unsupported_media_type(self, service):
        outcome = _convert(service, declared_media_type="text/html")
        assert _kind(outcome) == "UnsupportedType"
        assert outcome.error.to_payload()["supportedTypes"] == list(service.settings.allowed_media_types)

    def test_too_large(self, service, image_codec):
        data = b"\0" * (12 * 1024 * 1024)
        outcome = _convert(service, data=data, declared_media_type="image/png", file_name="big.png", target_format="jpg")
        assert _kind(outcome) == "FileTooLarge"
        assert outcome.error.to_payload()["maxSize"] == 10485760
        assert image_codec.calls == []

    def test_same_format_before_classification(self, service, document_codec):
        outcome = _convert(service, declared_media_type=DOCX, file_name="report.docx", target_format="docx")
        assert _kind(outcome) == "SameFormat"
        assert document_codec.calls == []

    def test_pdf_to_pdf_is_same_format(self, service):
        outcome = _convert(service, declared_media_type="application/pdf", file_name="a.pdf", target_format="pdf")
        assert _kind(outcome) == "SameFormat"

    def test_unknown_extension(self, service):
        outcome = _convert(service, declared_media_type="image/png", file_name="scan.bmp", target_format="png")
        assert _kind(outcome) == "UnsupportedFileType"

    def test_image_to_bmp(self, service):
        assert _kind(_convert(service, target_format="bmp")) == "UnsupportedTargetFormat"

    def test_document_to_docx(self, service):
        outcome = _convert(service, declared_media_type="application/msword", file_name="old.doc", target_format="docx")
        assert _kind(outcome) == "DocumentsOnlyConvertToPdf"


class TestExecution:
    def test_image_strategy_invoked(self, service, image_codec):
        outcome = _convert(service)
        assert isinstance(outcome, ConversionSuccess)
        assert outcome.data == b"IMG:png"
        assert outcome.suggested_file_name == "converted.png"
        assert image_codec.calls == [(b"bytes", "png")]

    def test_document_strategy_gets_only_bytes(self, service, document_codec):
        outcome = _convert(service, declared_media_type=DOCX, file_name="Report.DOCX", target_format="pdf")
        assert isinstance(outcome, ConversionSuccess)
        assert outcome.suggested_file_name == "converted.pdf"
        assert document_codec.calls == [b"bytes"]

    def test_pdf_pass_through_for_other_target(self, service):
        outcome = _convert(service, data=b"%PDF-1.4", declared_media_type="application/pdf", file_name="a.pdf", target_format="png")
        assert isinstance(outcome, ConversionSuccess)
        assert outcome.data == b"%PDF-1.4"

    def test_codec_failure_is_wrapped(self, settings, caplog):
        service = ConversionService(settings, image_codec=FakeImageCodec(), document_codec=FailingDocumentCodec())
        with caplog.at_level(logging.ERROR, logger="file_gateway.conversion.service"):
            outcome = _convert(service, declared_media_type=DOCX, file_name="r.docx", target_format="pdf")
        assert _kind(outcome) == "ConversionFailed"
        err = outcome.error
        assert isinstance(err, ConversionFailed)
        assert "source file could not be loaded" in err.detail
        assert isinstance(err.__cause__, RuntimeError)
        assert "Conversion error (document)" in caplog.text

    def test_timeout(self):
        settings = Settings(conversion_timeout=0.05)
        service = ConversionService(settings, image_codec=SlowImageCodec(), document_codec=FakeDocumentCodec())
        outcome = _convert(service)
        assert _kind(outcome) == "ConversionTimeout"
        assert isinstance(outcome.error, ConversionTimeout)
        assert outcome.error.timeout == 0.05

    def test_real_png_to_jpg(self, settings, png_bytes):
        service = ConversionService(settings, image_codec=PillowImageCodec(), document_codec=FakeDocumentCodec())
        outcome = _convert(service, data=png_bytes, declared_media_type="image/png", file_name="pic.png", target_format="jpg")
        assert isinstance(outcome, ConversionSuccess)
        assert outcome.data[:3] == b"\xff\xd8\xff"
        assert outcome.suggested_file_name == "converted.jpg"


def test_describe_formats(service):
    described = service.describe_formats()
    assert described["maxSize"] == 10485760
    assert described["conversions"]["document"] == ["pdf"]


def test_transitions_logged(service, caplog):
    with caplog.at_level(logging.DEBUG, logger="file_gateway.conversion.service"):
        _convert(service)
    for state in ("validated", "classified", "strategy_resolved", "executing", "succeeded"):
        assert f"-> {state}" in caplog.text


def test_header_unsafe_target_never_reaches_codec(service):
    outcome = _convert(service, data=b"%PDF", declared_media_type="application/pdf", file_name="a.pdf", target_format="png;x=1")
    assert _kind(outcome) == "InvalidTargetFormat"
