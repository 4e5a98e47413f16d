import asyncio
import logging
from enum import Enum

from ..config import Settings
from .classifier import classify
from .errors import ConversionFailed, ConversionTimeout, GatewayError
from .interfaces import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    DocumentCodec,
    ImageCodec,
    UploadRequest,
)
from .registry import Strategy, StrategyRegistry
from .validation import validate

logger = logging.getLogger(__name__)


class DispatchState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    CLASSIFIED = "classified"
    STRATEGY_RESOLVED = "strategy_resolved"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ConversionService:
    """Core domain service dispatching one upload to its conversion strategy.

    This service is framework-agnostic. ``convert`` never raises: every path
    ends in a ``ConversionSuccess`` or a ``ConversionFailure`` carrying a
    typed ``GatewayError``. Codec calls are blocking and run in a worker
    thread bounded by ``settings.conversion_timeout``.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        image_codec: ImageCodec,
        document_codec: DocumentCodec,
    ) -> None:
        self._settings = settings
        self._registry = StrategyRegistry(image_codec, document_codec)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> StrategyRegistry:
        return self._registry

    async def convert(self, request: UploadRequest) -> ConversionOutcome:
        state = DispatchState.RECEIVED
        try:
            error = validate(request, self._settings)
            if error is not None:
                raise error
            state = self._advance(state, DispatchState.VALIDATED, request)

            extension = request.source_extension
            category = classify(extension)
            state = self._advance(state, DispatchState.CLASSIFIED, request, category=category.value)

            strategy = self._registry.resolve(category, request.target_format, extension=extension)
            state = self._advance(state, DispatchState.STRATEGY_RESOLVED, request, strategy=strategy.name)

            state = self._advance(state, DispatchState.EXECUTING, request)
            data = await self._execute(strategy, request, request.data)  # type: ignore[arg-type]
        except GatewayError as e:
            self._advance(state, DispatchState.FAILED, request, error=e.code)
            if e.is_client_error:
                logger.info("Rejected %r -> %s: %s", request.file_name, request.target_format, e.code)
            return ConversionFailure(e)

        self._advance(state, DispatchState.SUCCEEDED, request)
        return ConversionSuccess(data=data, suggested_file_name=f"converted.{request.target_format}")

    async def _execute(self, strategy: Strategy, request: UploadRequest, data: bytes) -> bytes:
        timeout = self._settings.conversion_timeout
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(strategy, data, request.target_format),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "Conversion of %r (%s) exceeded %ss", request.file_name, strategy.name, timeout
            )
            raise ConversionTimeout(strategy.category.value, timeout) from e
        except Exception as e:
            logger.exception("Conversion error (%s) for %r", strategy.category.value, request.file_name)
            raise ConversionFailed(strategy.category.value, e) from e

    @staticmethod
    def _advance(
        current: DispatchState,
        new: DispatchState,
        request: UploadRequest,
        **fields: object,
    ) -> DispatchState:
        logger.debug(
            "%s -> %s for %r (target=%s) %s",
            current.value,
            new.value,
            request.file_name,
            request.target_format,
            fields or "",
        )
        return new

    def describe_formats(self) -> dict[str, object]:
        """Limits and legality table published to clients."""
        return {
            "supportedTypes": list(self._settings.allowed_media_types),
            "maxSize": self._settings.max_file_size,
            "conversions": self._registry.supported_conversions(),
        }

