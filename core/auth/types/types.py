# core/auth/types/types.py
"""
core/auth/types/types.py - 크로스 계정 인증 모듈의 핵심 타입 정의

이 모듈은 자격증명 해석 시스템 전체에서 사용되는 기본 타입들을 정의합니다.

포함 항목:
    - Credential: 호출자(CDK 등)에게 반환되는 임시 자격증명
    - utc_now: 만료 판단에 사용하는 기본 시계 함수
    - 에러 클래스: AuthError, NoStrategyConfiguredError, ProfileNotFoundError,
      SSOCacheMissingError, SSONotLoggedInError, TokenExchangeError,
      MFAPromptCancelledError, CredentialAcquisitionError
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from core.exceptions import CrossAccountError

# 만료 판단에 사용하는 시계 타입 (테스트에서 주입)
Clock = Callable[[], datetime]

# MFA 코드 요청 함수 타입: (profile_name, mfa_serial) -> one-time code
TokenCodeFn = Callable[[str, str], str]


def utc_now() -> datetime:
    """현재 시각을 UTC(tz-aware)로 반환합니다."""
    return datetime.now(timezone.utc)


# =============================================================================
# Credential
# =============================================================================


@dataclass(frozen=True)
class Credential:
    """해석이 완료된 AWS 임시 자격증명

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰 (정적 키 프로파일이면 빈 문자열)
    """

    access_key_id: str
    secret_access_key: str
    session_token: str = ""

    def __repr__(self) -> str:
        # 시크릿이 로그/트레이스백에 노출되지 않도록 마스킹
        return f"Credential(access_key_id={self.access_key_id!r}, secret_access_key='***', session_token='***')"

    def to_env_vars(self) -> dict[str, str]:
        """AWS SDK 표준 환경 변수 형식으로 변환"""
        env = {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
        }
        if self.session_token:
            env["AWS_SESSION_TOKEN"] = self.session_token
        return env

    def to_dict(self) -> dict[str, Any]:
        """credential_process 호환 JSON 형식으로 변환"""
        data = {
            "Version": 1,
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
        }
        if self.session_token:
            data["SessionToken"] = self.session_token
        return data


# =============================================================================
# Error Classes
# =============================================================================


class AuthError(CrossAccountError):
    """인증 관련 기본 에러 클래스

    모든 자격증명 해석 에러의 부모 클래스입니다.
    원인 예외(cause)를 체이닝하여 디버깅을 용이하게 합니다.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, cause)


class NoStrategyConfiguredError(AuthError):
    """계정에 대한 해석 전략(profile 등)이 설정되지 않았을 때 발생하는 에러

    Attributes:
        account_id: 전략을 찾을 수 없는 계정 ID
    """

    def __init__(self, account_id: str):
        super().__init__(f"계정 {account_id}에 대한 자격증명 전략이 설정되지 않았습니다")
        self.account_id = account_id
        self.details["account_id"] = account_id


class ProfileNotFoundError(AuthError):
    """AWS 설정 파일에 지정된 named profile이 없을 때 발생하는 에러

    Attributes:
        profile_name: 찾을 수 없는 프로파일 이름
    """

    def __init__(self, profile_name: str, cause: Exception | None = None):
        super().__init__(f"AWS named profile을 찾을 수 없습니다: {profile_name}", cause)
        self.profile_name = profile_name
        self.details["profile_name"] = profile_name


class SSOCacheMissingError(AuthError):
    """SSO 토큰 캐시 디렉토리가 없을 때 발생하는 에러

    AWS CLI v2로 `aws sso login`을 한 번도 수행하지 않은 경우입니다.

    Attributes:
        cache_dir: 확인한 캐시 디렉토리 경로
    """

    def __init__(self, cache_dir: str):
        super().__init__(f"SSO 캐시 디렉토리가 없습니다 ({cache_dir}) - 먼저 `aws sso login`을 실행하세요")
        self.cache_dir = cache_dir
        self.details["cache_dir"] = cache_dir


class SSONotLoggedInError(AuthError):
    """유효한 SSO 토큰이 없을 때 발생하는 에러

    캐시 디렉토리는 있지만 start URL/리전이 일치하고 만료되지 않은 토큰이 없는 경우입니다.

    Attributes:
        start_url: SSO 시작 URL
        region: SSO 리전
    """

    def __init__(self, start_url: str, region: str | None):
        super().__init__(f"{start_url} ({region}) SSO 세션이 만료되었습니다 - 먼저 `aws sso login`을 실행하세요")
        self.start_url = start_url
        self.region = region
        self.details.update({"start_url": start_url, "region": region})


class TokenExchangeError(AuthError):
    """SSO 토큰을 역할 자격증명으로 교환하는 데 실패했을 때 발생하는 에러

    Attributes:
        profile_name: 교환을 시도한 프로파일 이름
        error_code: botocore 에러 코드 (옵션)
    """

    def __init__(
        self,
        profile_name: str,
        message: str,
        error_code: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(f"[{profile_name}] sso.get_role_credentials: {message}", cause)
        self.profile_name = profile_name
        self.error_code = error_code
        self.details.update({"profile_name": profile_name, "error_code": error_code})


class MFAPromptCancelledError(AuthError):
    """사용자가 MFA 코드 입력을 취소했을 때 발생하는 에러

    Attributes:
        mfa_serial: MFA 디바이스 시리얼 (ARN)
    """

    def __init__(self, mfa_serial: str, cause: Exception | None = None):
        super().__init__(f"MFA 코드 입력이 취소되었습니다 ({mfa_serial})", cause)
        self.mfa_serial = mfa_serial
        self.details["mfa_serial"] = mfa_serial


class CredentialAcquisitionError(AuthError):
    """프로파일 기반 자격증명 획득(assume-role 등)이 실패했을 때 발생하는 에러

    에러 메시지 형식: "[profile] operation: message"

    Attributes:
        profile_name: 자격증명을 획득하려던 프로파일 이름
        operation: 실패한 작업 이름 (예: "assume_role", "get_session_token")
        error_code: botocore 에러 코드 (옵션)
    """

    def __init__(
        self,
        profile_name: str,
        operation: str,
        message: str,
        error_code: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(f"[{profile_name}] {operation}: {message}", cause)
        self.profile_name = profile_name
        self.operation = operation
        self.error_code = error_code
        self.details.update(
            {
                "profile_name": profile_name,
                "operation": operation,
                "error_code": error_code,
            }
        )
