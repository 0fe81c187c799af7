# core/auth/provider/profile.py
"""
named profile 기반 자격증명 해석 (Profile Credential Resolver)

해석 순서:
    1. 자격증명 캐시 확인 (유효하면 즉시 반환, 네트워크/입력 없음)
    2. named profile 속성 조회
    3. SSO 프로파일 → SSO 토큰 탐색 → SSOCredentialResolver
    4. 일반 프로파일:
       - role_arn 있음      → sts:AssumeRole (mfa_serial 있으면 MFA 코드 포함)
       - mfa_serial만 있음  → sts:GetSessionToken (MFA)
       - 둘 다 없음          → 프로파일의 정적 키 (캐시하지 않음)
    5. 4개 필드를 한 번에 캐시에 기록

source_profile 자체의 자격증명 해석(중첩 assume-role 등)은 boto3 Session에 위임합니다.
실패 시 재시도하지 않고 에러를 그대로 전파합니다.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

import boto3
from botocore.credentials import (
    CanonicalNameCredentialSourcer,
    ContainerProvider,
    EnvProvider,
    InstanceMetadataFetcher,
    InstanceMetadataProvider,
)
from botocore.exceptions import BotoCoreError, ClientError
from botocore.exceptions import ProfileNotFound as BotocoreProfileNotFound

from core.exceptions import get_error_code

from ..cache.cache import CachedCredential, CredentialCache, parse_timestamp
from ..cache.sso_token import SSOTokenLocator
from ..config.loader import ProfileAttributes, ProfileStore
from ..types import (
    Clock,
    Credential,
    CredentialAcquisitionError,
    MFAPromptCancelledError,
    ProfileNotFoundError,
    TokenCodeFn,
    utc_now,
)
from .sso import SSOCredentialResolver

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., Any]

SESSION_NAME_PREFIX = "cdk-cross-account"


def create_credential_sourcer() -> CanonicalNameCredentialSourcer:
    """credential_source(Environment, EcsContainer, Ec2InstanceMetadata) 해석기 생성"""
    return CanonicalNameCredentialSourcer(
        [
            EnvProvider(),
            ContainerProvider(),
            InstanceMetadataProvider(iam_role_fetcher=InstanceMetadataFetcher()),
        ]
    )


def _no_token_prompt(profile_name: str, mfa_serial: str) -> str:
    """MFA 입력 함수가 주입되지 않은 경우의 기본값"""
    raise MFAPromptCancelledError(mfa_serial)


class ProfileCredentialResolver:
    """named profile로 자격증명을 해석하고 캐시에 저장하는 Resolver

    Example:
        resolver = ProfileCredentialResolver(
            cache=CredentialCache(),
            profile_store=ProfileStore(),
            token_locator=SSOTokenLocator(),
            sso_resolver=SSOCredentialResolver(),
            token_code_fn=ask_mfa_code,
        )
        credential = resolver.resolve_with_profile("dev", "111111111111")
    """

    def __init__(
        self,
        cache: CredentialCache,
        profile_store: ProfileStore,
        token_locator: SSOTokenLocator,
        sso_resolver: SSOCredentialResolver,
        token_code_fn: Optional[TokenCodeFn] = None,
        session_factory: SessionFactory = boto3.Session,
        clock: Clock = utc_now,
        credential_sourcer: Optional[CanonicalNameCredentialSourcer] = None,
    ):
        """ProfileCredentialResolver 초기화

        Args:
            cache: 자격증명 캐시
            profile_store: named profile 저장소
            token_locator: SSO 토큰 탐색기
            sso_resolver: SSO 토큰 교환 Resolver
            token_code_fn: (프로파일 이름, MFA 시리얼)을 받아 one-time code를 반환하는 함수
            session_factory: boto3 Session 생성 함수 (테스트용)
            clock: 현재 시각 함수 (테스트용)
            credential_sourcer: role_arn + credential_source 프로파일의 원본 자격증명 해석기
        """
        self._cache = cache
        self._profile_store = profile_store
        self._token_locator = token_locator
        self._sso_resolver = sso_resolver
        self._token_code_fn = token_code_fn or _no_token_prompt
        self._session_factory = session_factory
        self._clock = clock
        self._credential_sourcer = credential_sourcer or create_credential_sourcer()

    def resolve_with_profile(self, profile_name: str, account_id: str) -> Credential:
        """named profile로 자격증명 해석

        Args:
            profile_name: AWS named profile 이름
            account_id: 대상 계정 ID

        Returns:
            Credential

        Raises:
            ProfileNotFoundError: 프로파일(또는 source_profile)이 없는 경우
            SSOCacheMissingError: SSO 캐시 디렉토리가 없는 경우
            SSONotLoggedInError: 유효한 SSO 토큰이 없는 경우
            TokenExchangeError: SSO 토큰 교환 실패
            MFAPromptCancelledError: MFA 입력 취소
            CredentialAcquisitionError: STS 호출 실패
        """
        logger.debug("named profile로 자격증명 해석: %s (account=%s)", profile_name, account_id)

        cached = self._cache.get_valid(profile_name)
        if cached is not None:
            return cached.to_credential()

        profile = self._profile_store.get(profile_name)

        if profile.is_sso:
            token = self._token_locator.find_valid_token(profile.sso_start_url, profile.sso_region)
            credential, expires_at = self._sso_resolver.resolve_with_sso(profile, token, account_id)
        else:
            credential, expires_at = self._acquire(profile)

        if expires_at is None:
            logger.info("만료 시간이 없는 정적 자격증명은 캐시하지 않습니다: %s", profile_name)
            return credential

        self._cache.put(profile_name, CachedCredential.from_credential(credential, expires_at))
        return credential

    # =========================================================================
    # 일반 프로파일
    # =========================================================================

    def _acquire(self, profile: ProfileAttributes) -> tuple[Credential, Optional[datetime]]:
        if profile.assumes_role:
            return self._assume_role(profile)
        if profile.requires_mfa:
            return self._get_session_token(profile)
        return self._static_credentials(profile)

    def _create_session(self, profile_name: Optional[str]) -> Any:
        """boto3 Session 생성 (profile_name이 없으면 기본 자격증명 체인)"""
        try:
            if profile_name:
                return self._session_factory(profile_name=profile_name)
            return self._session_factory()
        except BotocoreProfileNotFound as e:
            raise ProfileNotFoundError(profile_name or "default", cause=e) from e

    def _source_session(self, profile: ProfileAttributes) -> Any:
        """assume-role 원본 세션 (source_profile > credential_source > 기본 자격증명 체인)"""
        if profile.source_profile:
            return self._create_session(profile.source_profile)
        if profile.credential_source:
            return self._credential_source_session(profile)
        return self._create_session(None)

    def _credential_source_session(self, profile: ProfileAttributes) -> Any:
        source = profile.credential_source
        try:
            credentials = self._credential_sourcer.source_credentials(source)
        except BotoCoreError as e:
            raise CredentialAcquisitionError(profile.name, "credential_source", f"{source} 자격증명 로드 실패", cause=e) from e

        if credentials is None:
            raise CredentialAcquisitionError(profile.name, "credential_source", f"{source}에서 자격증명을 찾을 수 없습니다")

        frozen = credentials.get_frozen_credentials()
        return self._session_factory(
            aws_access_key_id=frozen.access_key,
            aws_secret_access_key=frozen.secret_key,
            aws_session_token=frozen.token,
        )

    def _request_token_code(self, profile: ProfileAttributes) -> str:
        """MFA one-time code 요청 (빈 값이면 취소로 간주)"""
        logger.debug("MFA 코드 요청: %s (profile=%s)", profile.mfa_serial, profile.name)
        code = self._token_code_fn(profile.name, profile.mfa_serial)
        if not code or not code.strip():
            raise MFAPromptCancelledError(profile.mfa_serial)
        return code.strip()

    def _assume_role(self, profile: ProfileAttributes) -> tuple[Credential, datetime]:
        session = self._source_session(profile)
        params: dict[str, Any] = {
            "RoleArn": profile.role_arn,
            "RoleSessionName": profile.role_session_name
            or f"{SESSION_NAME_PREFIX}-{int(self._clock().timestamp())}",
        }
        if profile.duration_seconds:
            params["DurationSeconds"] = profile.duration_seconds
        if profile.external_id:
            params["ExternalId"] = profile.external_id
        if profile.requires_mfa:
            params["SerialNumber"] = profile.mfa_serial
            params["TokenCode"] = self._request_token_code(profile)

        logger.debug("역할 assume: %s (source=%s)", profile.role_arn, profile.source_profile or profile.credential_source or "default chain")
        response = self._call_sts(profile, session, "assume_role", **params)
        return self._from_sts_credentials(response["Credentials"])

    def _get_session_token(self, profile: ProfileAttributes) -> tuple[Credential, datetime]:
        session = self._create_session(profile.name)
        params: dict[str, Any] = {
            "SerialNumber": profile.mfa_serial,
            "TokenCode": self._request_token_code(profile),
        }
        if profile.duration_seconds:
            params["DurationSeconds"] = profile.duration_seconds

        response = self._call_sts(profile, session, "get_session_token", **params)
        return self._from_sts_credentials(response["Credentials"])

    def _static_credentials(self, profile: ProfileAttributes) -> tuple[Credential, None]:
        session = self._create_session(profile.name)
        try:
            credentials = session.get_credentials()
        except BotoCoreError as e:
            raise CredentialAcquisitionError(profile.name, "get_credentials", "자격증명 로드 실패", cause=e) from e

        if credentials is None:
            raise CredentialAcquisitionError(profile.name, "get_credentials", "프로파일에 자격증명이 없습니다")

        frozen = credentials.get_frozen_credentials()
        return (
            Credential(
                access_key_id=frozen.access_key,
                secret_access_key=frozen.secret_key,
                session_token=frozen.token or "",
            ),
            None,
        )

    def _call_sts(self, profile: ProfileAttributes, session: Any, operation: str, **params: Any) -> dict[str, Any]:
        """STS 호출 및 botocore 예외 변환"""
        try:
            sts = session.client("sts", region_name=profile.region)
            return getattr(sts, operation)(**params)
        except ClientError as e:
            error = e.response.get("Error", {})
            raise CredentialAcquisitionError(
                profile.name,
                operation,
                error.get("Message") or "STS 호출 실패",
                error_code=get_error_code(e),
                cause=e,
            ) from e
        except BotoCoreError as e:
            raise CredentialAcquisitionError(profile.name, operation, "STS 호출 실패", cause=e) from e

    @staticmethod
    def _from_sts_credentials(data: dict[str, Any]) -> tuple[Credential, datetime]:
        expiration = data["Expiration"]
        if isinstance(expiration, str):
            expiration = parse_timestamp(expiration)

        return (
            Credential(
                access_key_id=data["AccessKeyId"],
                secret_access_key=data["SecretAccessKey"],
                session_token=data["SessionToken"],
            ),
            expiration,
        )
