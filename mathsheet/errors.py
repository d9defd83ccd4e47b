"""
Error taxonomy for worksheet generation.

Every failure that can reach a user is one of these. The session orchestrator
turns them into its single error message slot; the HTTP layer maps
``status_code`` onto the response.
"""

from typing import Optional

GENERATE_FAILED = "문제 생성 중 오류가 발생했습니다."
REPLACE_FAILED = "문제 교체 중 오류가 발생했습니다."


class MathSheetError(Exception):
    """Base class for user-visible worksheet errors."""

    status_code: int = 500
    default_message: str = GENERATE_FAILED

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MathSheetError):
    """Local precondition failure. Never reaches the generator."""

    status_code = 400
    default_message = "입력값을 확인해주세요."


class ConfigurationError(MathSheetError):
    """Required credential or service configuration is missing."""

    status_code = 500
    default_message = "Server configuration error: API key not found."


class TransportError(MathSheetError):
    """Network or HTTP failure reaching the generator."""

    status_code = 502
    default_message = "생성 서버에 연결하지 못했습니다. 잠시 후 다시 시도해주세요."


class MalformedResponseError(MathSheetError):
    """Generator response is not JSON or lacks the required shape."""

    status_code = 502
    default_message = "생성 서버의 응답 형식이 올바르지 않습니다. 잠시 후 다시 시도해주세요."
