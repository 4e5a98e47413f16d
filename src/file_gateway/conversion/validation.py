"""Request checks run before any conversion work happens.

Rules are evaluated in a fixed order and the first failure wins. Each rule is
a plain function taking the request and settings and returning either a
``GatewayError`` or ``None``.
"""

import re
from typing import Callable, Optional

from ..config import Settings
from .errors import (
    FileTooLarge,
    GatewayError,
    InvalidTargetFormat,
    MissingFile,
    MissingTargetFormat,
    SameFormat,
    UnsupportedType,
)
from .interfaces import UploadRequest

ValidationRule = Callable[[UploadRequest, Settings], Optional[GatewayError]]

_TARGET_FORMAT = re.compile(r"[A-Za-z0-9]+")


def require_file(request: UploadRequest, settings: Settings) -> GatewayError | None:
    if request.data is None:
        return MissingFile()
    return None


def require_target_format(request: UploadRequest, settings: Settings) -> GatewayError | None:
    if not (request.target_format or "").strip():
        return MissingTargetFormat()
    return None


def check_target_token(request: UploadRequest, settings: Settings) -> GatewayError | None:
    # The target ends up in the Content-Disposition filename.
    if not _TARGET_FORMAT.fullmatch(request.target_format):
        return InvalidTargetFormat(request.target_format)
    return None


def check_media_type(request: UploadRequest, settings: Settings) -> GatewayError | None:
    if request.declared_media_type not in settings.allowed_media_types:
        return UnsupportedType(request.declared_media_type, settings.allowed_media_types)
    return None


def check_size(request: UploadRequest, settings: Settings) -> GatewayError | None:
    if request.data is not None and len(request.data) > settings.max_file_size:
        return FileTooLarge(settings.max_file_size)
    return None


def check_format_identity(request: UploadRequest, settings: Settings) -> GatewayError | None:
    if request.source_extension == request.target_format:
        return SameFormat(request.target_format)
    return None


RULES: tuple[ValidationRule, ...] = (
    require_file,
    require_target_format,
    check_target_token,
    check_media_type,
    check_size,
    check_format_identity,
)


def validate(request: UploadRequest, settings: Settings) -> GatewayError | None:
    for rule in RULES:
        error = rule(request, settings)
        if error is not None:
            return error
    return None
