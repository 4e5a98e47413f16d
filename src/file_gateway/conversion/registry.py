from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from .errors import DocumentsOnlyConvertToPdf, UnsupportedFileType, UnsupportedTargetFormat
from .interfaces import DocumentCodec, FormatCategory, ImageCodec

IMAGE_TARGETS: tuple[str, ...] = ("jpg", "jpeg", "png", "webp", "gif")
DOCUMENT_TARGETS: tuple[str, ...] = ("pdf",)

StrategyKey = tuple[FormatCategory, str]


@dataclass(frozen=True)
class Strategy:
    name: str
    category: FormatCategory
    func: Callable[..., bytes]
    takes_target: bool = False

    def __call__(self, data: bytes, target_format: str) -> bytes:
        if self.takes_target:
            return self.func(data, target_format)
        return self.func(data)


def _pdf_passthrough(data: bytes) -> bytes:
    # No PDF transforms exist yet; any target returns the input unchanged.
    return data


class StrategyRegistry:
    """Read-only lookup from ``(category, target_format)`` to a strategy.

    Built once at startup; safe to share between concurrent requests.
    """

    def __init__(self, image_codec: ImageCodec, document_codec: DocumentCodec) -> None:
        image = Strategy("image", FormatCategory.IMAGE, image_codec.convert, takes_target=True)
        document = Strategy("document", FormatCategory.DOCUMENT, document_codec.convert_to_pdf)
        table: dict[StrategyKey, Strategy] = {}
        for target in IMAGE_TARGETS:
            table[(FormatCategory.IMAGE, target)] = image
        for target in DOCUMENT_TARGETS:
            table[(FormatCategory.DOCUMENT, target)] = document
        self._table: Mapping[StrategyKey, Strategy] = MappingProxyType(table)
        self._pdf = Strategy("pdf-passthrough", FormatCategory.PDF, _pdf_passthrough)

    def resolve(self, category: FormatCategory, target_format: str, *, extension: str = "") -> Strategy:
        if category is FormatCategory.UNKNOWN:
            raise UnsupportedFileType(extension)
        if category is FormatCategory.PDF:
            return self._pdf
        strategy = self._table.get((category, target_format))
        if strategy is not None:
            return strategy
        if category is FormatCategory.IMAGE:
            raise UnsupportedTargetFormat(target_format, IMAGE_TARGETS)
        raise DocumentsOnlyConvertToPdf(target_format)

    def target_formats(self, category: FormatCategory) -> tuple[str, ...]:
        if category is FormatCategory.IMAGE:
            return IMAGE_TARGETS
        if category is FormatCategory.DOCUMENT:
            return DOCUMENT_TARGETS
        return ()

    def supported_conversions(self) -> dict[str, list[str]]:
        """Legal targets per category; PDF accepts any target as a pass-through."""
        return {
            FormatCategory.IMAGE.value: list(self.target_formats(FormatCategory.IMAGE)),
            FormatCategory.DOCUMENT.value: list(self.target_formats(FormatCategory.DOCUMENT)),
            FormatCategory.PDF.value: ["*"],
        }
