"""
core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 기본 예외 클래스와 botocore 예외 헬퍼를 정의합니다.

예외 계층 구조:
    CrossAccountError (베이스)
    └── AuthError (인증 관련) - core.auth.types에서 정의
        ├── NoStrategyConfiguredError
        ├── ProfileNotFoundError
        ├── SSOCacheMissingError
        ├── SSONotLoggedInError
        ├── TokenExchangeError
        ├── MFAPromptCancelledError
        └── CredentialAcquisitionError

Usage:
    from core.exceptions import CrossAccountError, get_error_code

    try:
        credential = resolver.resolve(account_id, config)
    except CrossAccountError as e:
        print(e.to_dict())
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class CrossAccountError(Exception):
    """cdk-cross-account 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def get_error_code(error: Exception) -> Optional[str]:
    """botocore ClientError에서 에러 코드 추출

    Args:
        error: 확인할 예외

    Returns:
        에러 코드 문자열 또는 None (ClientError가 아닌 경우)
    """
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code")
    return None


def is_token_expired(error: Exception) -> bool:
    """SSO 액세스 토큰 만료/무효 오류인지 확인

    SSO GetRoleCredentials는 토큰이 만료되면 UnauthorizedException을 반환합니다.

    Args:
        error: 확인할 예외

    Returns:
        토큰 만료 오류이면 True
    """
    return get_error_code(error) in (
        "UnauthorizedException",
        "ExpiredTokenException",
        "ExpiredToken",
    )
