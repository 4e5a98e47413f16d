import logging
import os

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from file_gateway import __version__
from file_gateway.config import Settings, get_settings
from file_gateway.conversion import ConversionFailure, ConversionService, UploadRequest
from file_gateway.conversion.adapters import LibreOfficeDocumentCodec, PillowImageCodec

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def build_service(settings: Settings) -> ConversionService:
    return ConversionService(
        settings,
        image_codec=PillowImageCodec(),
        document_codec=LibreOfficeDocumentCodec(
            settings.soffice_binary, timeout=settings.conversion_timeout
        ),
    )


async def _read_limited(upload: UploadFile, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes so oversize uploads are never fully buffered."""
    buf = bytearray()
    try:
        while len(buf) <= limit:
            chunk = await upload.read(min(CHUNK_SIZE, limit + 1 - len(buf)))
            if not chunk:
                break
            buf.extend(chunk)
    finally:
        await upload.close()
    return bytes(buf)


def create_app(settings: Settings | None = None, service: ConversionService | None = None) -> FastAPI:
    """Build the HTTP gateway around a conversion service.

    Limits and CORS origins come from ``settings``; nothing is read from
    ambient module state after construction.
    """
    settings = settings or get_settings()
    service = service or build_service(settings)
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="File Conversion Gateway",
        version=__version__,
        description="Convert an uploaded image or office document into another format.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.state.settings = settings
    app.state.service = service

    @app.get("/health")
    def health() -> dict[str, str]:
        """Basic health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/formats")
    def formats(request: Request) -> dict[str, object]:
        """Allow-listed media types, size ceiling and legal targets per category."""
        return request.app.state.service.describe_formats()

    @app.post("/api/convert")
    async def convert(
        request: Request,
        file: UploadFile | None = File(None),
        target_format: str = Form("", alias="targetFormat"),
    ) -> Response:
        """Convert the uploaded ``file`` into ``targetFormat``.

        Accepts multipart/form-data. Returns the converted bytes as an
        attachment named ``converted.<targetFormat>``, or a JSON error body
        with a machine ``error`` code and a human ``userMessage``.
        """
        svc: ConversionService = request.app.state.service
        data = None
        file_name = ""
        media_type = ""
        if file is not None:
            file_name = file.filename or ""
            media_type = (file.content_type or "").strip().lower()
            data = await _read_limited(file, svc.settings.max_file_size)

        upload = UploadRequest(
            data=data,
            declared_media_type=media_type,
            file_name=file_name,
            target_format=target_format.strip().lower(),
        )
        outcome = await svc.convert(upload)
        if isinstance(outcome, ConversionFailure):
            err = outcome.error
            return JSONResponse(
                status_code=err.status_code,
                content=err.to_payload(debug=svc.settings.debug),
            )
        return Response(
            content=outcome.data,
            media_type="application/octet-stream",
            headers={"Content-Disposition": f"attachment; filename={outcome.suggested_file_name}"},
        )

    return app


app = create_app()


def run() -> None:
    """Run a development ASGI server using uvicorn.

    Exposes the app at host:port (default 0.0.0.0:5000). Set PORT env var to override.
    """
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    # Enable reload in dev unless explicitly disabled
    reload = os.getenv("RELOAD", "true").lower() in {"1", "true", "yes", "on"}

    uvicorn.run("file_gateway.webapi:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
