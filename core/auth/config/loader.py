# core/auth/config/loader.py
"""
AWS named profile 조회 (Named-Profile Store)

~/.aws/config 및 ~/.aws/credentials 파싱은 botocore에 위임하고,
이 모듈은 자격증명 해석에 필요한 속성만 ProfileAttributes로 추출합니다.

지원하는 프로파일 형태:
    [profile dev]                       # assume-role (+ MFA)
    role_arn = arn:aws:iam::111111111111:role/Deploy
    source_profile = default
    mfa_serial = arn:aws:iam::000000000000:mfa/me

    [profile sso-dev]                   # Legacy SSO
    sso_start_url = https://my-sso.awsapps.com/start
    sso_region = ap-northeast-2
    sso_account_id = 111111111111
    sso_role_name = AdministratorAccess

    [profile sso-new]                   # sso-session 참조
    sso_session = my-sso
    sso_account_id = 111111111111
    sso_role_name = AdministratorAccess

    [sso-session my-sso]
    sso_start_url = https://my-sso.awsapps.com/start
    sso_region = ap-northeast-2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import botocore.session

from ..types import ProfileNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileAttributes:
    """자격증명 해석에 사용되는 named profile 속성

    Attributes:
        name: 프로파일 이름
        region: 기본 리전
        role_arn: assume-role 대상 역할 ARN
        source_profile: assume-role의 원본 자격증명 프로파일
        credential_source: 원본 자격증명 소스 (Environment, Ec2InstanceMetadata 등)
        mfa_serial: MFA 디바이스 시리얼 (ARN)
        role_session_name: assume-role 세션 이름
        external_id: assume-role External ID
        duration_seconds: assume-role 세션 유지 시간 (초)
        sso_start_url: SSO 시작 URL
        sso_region: SSO 리전
        sso_account_id: SSO 대상 계정 ID
        sso_role_name: SSO 역할 이름
        sso_session: 참조하는 sso-session 섹션 이름
    """

    name: str
    region: Optional[str] = None
    role_arn: Optional[str] = None
    source_profile: Optional[str] = None
    credential_source: Optional[str] = None
    mfa_serial: Optional[str] = None
    role_session_name: Optional[str] = None
    external_id: Optional[str] = None
    duration_seconds: Optional[int] = None
    sso_start_url: Optional[str] = None
    sso_region: Optional[str] = None
    sso_account_id: Optional[str] = None
    sso_role_name: Optional[str] = None
    sso_session: Optional[str] = None

    @property
    def is_sso(self) -> bool:
        """SSO 프로파일 여부 (sso_start_url이 직접 또는 sso-session을 통해 설정됨)"""
        return bool(self.sso_start_url)

    @property
    def assumes_role(self) -> bool:
        """assume-role 프로파일 여부"""
        return bool(self.role_arn)

    @property
    def requires_mfa(self) -> bool:
        """MFA 코드가 필요한지 여부"""
        return bool(self.mfa_serial)

    @classmethod
    def from_config(
        cls,
        name: str,
        section: Dict[str, Any],
        sso_sessions: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> "ProfileAttributes":
        """botocore full_config의 프로파일 섹션에서 생성

        sso_session을 참조하면 해당 [sso-session] 섹션의 start URL/리전을 사용합니다.
        프로파일에 직접 설정된 값이 우선합니다.
        """
        sso_start_url = section.get("sso_start_url")
        sso_region = section.get("sso_region")

        sso_session = section.get("sso_session")
        if sso_session:
            session_section = (sso_sessions or {}).get(sso_session)
            if session_section is None:
                logger.warning("프로파일 %s가 참조하는 sso-session %s를 찾을 수 없습니다", name, sso_session)
            else:
                sso_start_url = sso_start_url or session_section.get("sso_start_url")
                sso_region = sso_region or session_section.get("sso_region")

        duration = section.get("duration_seconds")
        return cls(
            name=name,
            region=section.get("region"),
            role_arn=section.get("role_arn"),
            source_profile=section.get("source_profile"),
            credential_source=section.get("credential_source"),
            mfa_serial=section.get("mfa_serial"),
            role_session_name=section.get("role_session_name"),
            external_id=section.get("external_id"),
            duration_seconds=int(duration) if duration else None,
            sso_start_url=sso_start_url,
            sso_region=sso_region,
            sso_account_id=section.get("sso_account_id"),
            sso_role_name=section.get("sso_role_name"),
            sso_session=sso_session,
        )


class ProfileStore:
    """AWS named profile 읽기 전용 저장소

    botocore Session의 full_config를 사용하므로 AWS_CONFIG_FILE,
    AWS_SHARED_CREDENTIALS_FILE 환경 변수를 그대로 따릅니다.
    """

    def __init__(self, session_factory: Callable[[], botocore.session.Session] = botocore.session.Session):
        """ProfileStore 초기화

        Args:
            session_factory: botocore Session 생성 함수 (테스트용)
        """
        self._session_factory = session_factory

    def _full_config(self) -> Dict[str, Any]:
        return self._session_factory().full_config

    def get(self, profile_name: str) -> ProfileAttributes:
        """프로파일 속성 조회

        Args:
            profile_name: AWS named profile 이름

        Returns:
            ProfileAttributes

        Raises:
            ProfileNotFoundError: 프로파일이 없는 경우
        """
        config = self._full_config()
        section = config.get("profiles", {}).get(profile_name)
        if section is None:
            raise ProfileNotFoundError(profile_name)

        profile = ProfileAttributes.from_config(profile_name, section, config.get("sso_sessions"))
        logger.debug(
            "프로파일 로드: %s (sso=%s, role=%s, mfa=%s)",
            profile_name,
            profile.is_sso,
            profile.assumes_role,
            profile.requires_mfa,
        )
        return profile
