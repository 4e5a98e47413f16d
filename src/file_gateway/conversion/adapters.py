import io
import logging
import subprocess
import tempfile
from pathlib import Path

from PIL import Image

from .interfaces import DocumentCodec, ImageCodec

logger = logging.getLogger(__name__)


class PillowImageCodec(ImageCodec):
    _PIL_FORMATS = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "png": "PNG",
        "webp": "WEBP",
        "gif": "GIF",
        "tiff": "TIFF",
    }

    def convert(self, data: bytes, target_format: str) -> bytes:
        fmt = target_format.lower()
        pil_format = self._PIL_FORMATS.get(fmt, fmt.upper())
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            out_img = img
            # JPEG has no alpha channel or palette
            if pil_format == "JPEG" and img.mode not in ("RGB", "L", "CMYK"):
                out_img = img.convert("RGB")
            save_kwargs: dict[str, object] = {}
            if pil_format == "PNG":
                save_kwargs["optimize"] = True
            buffer = io.BytesIO()
            out_img.save(buffer, format=pil_format, **save_kwargs)
        return buffer.getvalue()


class LibreOfficeDocumentCodec(DocumentCodec):
    """Render office documents to PDF with headless LibreOffice.

    Every call works in its own temporary directory, including a private
    LibreOffice profile so concurrent renders do not fight over the profile
    lock. The directory is removed on every exit path.
    """

    def __init__(self, binary: str = "soffice", *, timeout: float | None = None) -> None:
        self._binary = binary
        self._timeout = timeout

    def convert_to_pdf(self, data: bytes) -> bytes:
        with tempfile.TemporaryDirectory(prefix="file-gateway-") as tmp:
            workdir = Path(tmp)
            source = workdir / "source"
            source.write_bytes(data)
            command = [
                self._binary,
                f"-env:UserInstallation={(workdir / 'profile').as_uri()}",
                "--headless",
                "--convert-to",
                "pdf",
                "--outdir",
                str(workdir),
                str(source),
            ]
            logger.debug("Running %s", " ".join(command))
            try:
                completed = subprocess.run(
                    command,
                    capture_output=True,
                    timeout=self._timeout,
                    check=False,
                )
            except FileNotFoundError as e:
                raise RuntimeError(f"LibreOffice binary '{self._binary}' not found") from e
            if completed.returncode != 0:
                stderr = completed.stderr.decode(errors="replace").strip()
                raise RuntimeError(f"soffice failed with code {completed.returncode}: {stderr}")
            output = workdir / "source.pdf"
            if not output.exists():
                raise RuntimeError("soffice did not produce a PDF")
            return output.read_bytes()
