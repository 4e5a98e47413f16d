import traceback


class GatewayError(Exception):
    """Base error for every rejected conversion request.

    Each subclass carries a fixed machine ``code``, the HTTP ``status_code``
    the gateway answers with, and its own typed payload fields. ``to_payload``
    renders the JSON body sent to clients.
    """

    code = "gateway_error"
    status_code = 400

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {}

    def to_payload(self, *, debug: bool = False) -> dict[str, object]:
        body: dict[str, object] = {"error": self.code, "userMessage": self.user_message}
        body.update(self.extra(debug=debug))
        return body


class MissingFile(GatewayError):
    code = "missing_file"

    def __init__(self) -> None:
        super().__init__("Please select a file to convert")


class MissingTargetFormat(GatewayError):
    code = "missing_target_format"

    def __init__(self) -> None:
        super().__init__("Please choose a target format")


class InvalidTargetFormat(GatewayError):
    code = "invalid_target_format"

    def __init__(self, target_format: str) -> None:
        super().__init__("Target format must contain only letters and digits")
        self.target_format = target_format


class UnsupportedType(GatewayError):
    code = "unsupported_type"
    status_code = 415

    def __init__(self, media_type: str, supported_types: tuple[str, ...]) -> None:
        super().__init__(f"File type {media_type or 'unknown'} is not supported")
        self.media_type = media_type
        self.supported_types = supported_types

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {"supportedTypes": list(self.supported_types)}


class FileTooLarge(GatewayError):
    code = "file_too_large"
    status_code = 413

    def __init__(self, max_size: int) -> None:
        mb = max_size / 1024 / 1024
        super().__init__(f"File exceeds maximum size of {mb:g}MB")
        self.max_size = max_size

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {"maxSize": self.max_size}


class SameFormat(GatewayError):
    code = "same_format"

    def __init__(self, file_format: str) -> None:
        super().__init__("Source and target formats are the same")
        self.file_format = file_format


class UnsupportedFileType(GatewayError):
    code = "unsupported_file_type"

    def __init__(self, extension: str) -> None:
        label = f".{extension}" if extension else "without an extension"
        super().__init__(f"Unsupported file type: files {label} cannot be converted")
        self.extension = extension


class UnsupportedTargetFormat(GatewayError):
    code = "unsupported_target_format"

    def __init__(self, target_format: str, supported_formats: tuple[str, ...]) -> None:
        super().__init__(f"Unsupported target image format: {target_format}")
        self.target_format = target_format
        self.supported_formats = supported_formats

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {"supportedFormats": list(self.supported_formats)}


class DocumentsOnlyConvertToPdf(GatewayError):
    code = "documents_only_convert_to_pdf"

    def __init__(self, target_format: str) -> None:
        super().__init__("Documents can only be converted to PDF")
        self.target_format = target_format

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {"supportedFormats": ["pdf"]}


class ConversionFailed(GatewayError):
    """A codec collaborator raised while transcoding.

    The cause message and traceback are kept on the error but only reach the
    client payload in debug mode.
    """

    code = "conversion_failed"
    status_code = 500

    def __init__(self, category: str, cause: BaseException) -> None:
        super().__init__("Failed to convert file. Please try again.")
        self.category = category
        self.cause = cause
        self.detail = f"Conversion failed: {cause}"

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        if not debug:
            return {}
        stack = "".join(traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__))
        return {"detail": self.detail, "stack": stack}


class ConversionTimeout(GatewayError):
    code = "conversion_timeout"
    status_code = 504

    def __init__(self, category: str, timeout: float) -> None:
        super().__init__(f"Conversion took longer than {timeout:g} seconds. Try a smaller file.")
        self.category = category
        self.timeout = timeout

    def extra(self, *, debug: bool = False) -> dict[str, object]:
        return {"timeout": self.timeout}
