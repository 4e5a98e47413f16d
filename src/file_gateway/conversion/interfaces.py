from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Protocol, Union

from .errors import GatewayError


class ImageCodec(Protocol):
    def convert(self, data: bytes, target_format: str) -> bytes:
        """Re-encode image bytes into ``target_format``.
        This is a blocking call; callers should offload to threads if needed.
        """


class DocumentCodec(Protocol):
    def convert_to_pdf(self, data: bytes) -> bytes:
        """Render an office document into PDF bytes.
        This is a blocking call; callers should offload to threads if needed.
        """


class FormatCategory(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    PDF = "pdf"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UploadRequest:
    data: bytes | None
    declared_media_type: str
    file_name: str
    target_format: str

    @property
    def source_extension(self) -> str:
        return PurePath(self.file_name or "").suffix.lower().lstrip(".")


@dataclass(frozen=True)
class ConversionSuccess:
    data: bytes
    suggested_file_name: str


@dataclass(frozen=True)
class ConversionFailure:
    error: GatewayError

    @property
    def kind(self) -> str:
        return type(self.error).__name__


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]
