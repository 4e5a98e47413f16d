import io

import pytest
from PIL import Image

from file_gateway.config import Settings
from file_gateway.conversion import ConversionService

from fakes import FakeDocumentCodec, FakeImageCodec


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def image_codec():
    return FakeImageCodec()


@pytest.fixture
def document_codec():
    return FakeDocumentCodec()


@pytest.fixture
def service(settings, image_codec, document_codec):
    return ConversionService(settings, image_codec=image_codec, document_codec=document_codec)


@pytest.fixture
def png_bytes():
    """A small RGBA PNG of a couple of kilobytes."""
    img = Image.new("RGBA", (40, 40), (255, 0, 0, 128))
    for x in range(40):
        for y in range(0, 40, 3):
            img.putpixel((x, y), (x * 6, y * 6, (x * y) % 255, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
