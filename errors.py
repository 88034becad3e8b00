# Taksonomi error untuk alur audit, diterjemahkan ke exit code (CLI) atau HTTP 500 (API)


class AuditError(Exception):
    """Base class untuk semua kegagalan analisis kontrak."""


class MissingApiKeyError(AuditError):
    """API key tidak dikonfigurasi atau tidak diberikan."""

    def __init__(self, message: str = "API key is not configured"):
        super().__init__(message)


class MalformedResponseError(AuditError):
    """Respons LLM tidak memanggil function/tool yang diharapkan."""


class ResponseParseError(AuditError):
    """Argumen tool call bukan objek JSON yang valid."""


class TransportError(AuditError):
    """Gagal menghubungi provider LLM (network error atau status non-2xx)."""
