"""
Domain layer for file conversion.
Provides the validation pipeline, format classifier, strategy registry and
the dispatcher service, plus codec gateways, so front-ends (HTTP or others)
can use the same core logic.
"""

from .classifier import classify
from .errors import GatewayError
from .interfaces import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    DocumentCodec,
    FormatCategory,
    ImageCodec,
    UploadRequest,
)
from .registry import StrategyRegistry
from .service import ConversionService, DispatchState
from .validation import validate
