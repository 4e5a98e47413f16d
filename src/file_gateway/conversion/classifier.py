from types import MappingProxyType

from .interfaces import FormatCategory

_EXTENSION_CATEGORIES = MappingProxyType(
    {
        **{ext: FormatCategory.IMAGE for ext in ("jpg", "jpeg", "png", "webp", "gif", "tiff")},
        **{ext: FormatCategory.DOCUMENT for ext in ("doc", "docx", "odt")},
        "pdf": FormatCategory.PDF,
    }
)


def classify(extension: str) -> FormatCategory:
    """Map a file extension to its conversion category; unknown input yields UNKNOWN."""
    key = (extension or "").strip().lower().lstrip(".")
    return _EXTENSION_CATEGORIES.get(key, FormatCategory.UNKNOWN)

