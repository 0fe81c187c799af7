# core/auth/provider/sso.py
"""
SSO 토큰 → 역할 자격증명 교환

AWS CLI v2가 캐시한 SSO 액세스 토큰으로 sso:GetRoleCredentials를 호출합니다.
GetRoleCredentials는 서명 없이(bearer 토큰) 호출하는 API이므로 UNSIGNED 클라이언트를 사용합니다.

캐시 만료 시간:
    SSO 토큰 만료 시간과 응답의 roleCredentials.expiration 중 빠른 쪽을 사용합니다.
    어느 한쪽이 먼저 만료되면 캐시된 자격증명도 더 이상 유효하지 않기 때문입니다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import get_error_code, is_token_expired

from ..cache.sso_token import SSOToken
from ..config.loader import ProfileAttributes
from ..types import Credential, TokenExchangeError

logger = logging.getLogger(__name__)

SSOClientFactory = Callable[[Optional[str]], Any]


def create_sso_client(region: Optional[str]) -> Any:
    """서명하지 않는 SSO 포털 클라이언트 생성"""
    return boto3.client(
        "sso",
        region_name=region,
        config=Config(signature_version=UNSIGNED),
    )


class SSOCredentialResolver:
    """SSO 액세스 토큰으로 역할 자격증명을 발급받는 Resolver"""

    def __init__(self, client_factory: SSOClientFactory = create_sso_client):
        """SSOCredentialResolver 초기화

        Args:
            client_factory: 리전을 받아 SSO 클라이언트를 생성하는 함수 (테스트용)
        """
        self._client_factory = client_factory

    def resolve_with_sso(
        self,
        profile: ProfileAttributes,
        token: SSOToken,
        account_id: str,
    ) -> tuple[Credential, datetime]:
        """SSO 토큰을 역할 자격증명으로 교환

        Args:
            profile: SSO 프로파일 속성
            token: 유효한 SSO 토큰
            account_id: 대상 계정 ID (프로파일의 sso_account_id와 같아야 함)

        Returns:
            (Credential, 캐시 만료 시간)

        Raises:
            TokenExchangeError: 역할 이름/계정 누락, 계정 불일치 또는 GetRoleCredentials 실패
        """
        if not profile.sso_role_name:
            raise TokenExchangeError(profile.name, "sso_role_name이 설정되지 않았습니다")

        # 프로파일 하나는 계정 하나에만 대응 (캐시 키는 프로파일 이름)
        if not profile.sso_account_id:
            raise TokenExchangeError(profile.name, "sso_account_id가 설정되지 않았습니다")
        if profile.sso_account_id != account_id:
            raise TokenExchangeError(
                profile.name,
                f"sso_account_id({profile.sso_account_id})가 요청 계정({account_id})과 다릅니다",
            )

        logger.debug(
            "SSO 역할 자격증명 요청: %s/%s (region=%s)",
            account_id,
            profile.sso_role_name,
            profile.sso_region,
        )

        client = self._client_factory(profile.sso_region)
        try:
            response = client.get_role_credentials(
                roleName=profile.sso_role_name,
                accountId=account_id,
                accessToken=token.access_token,
            )
        except ClientError as e:
            if is_token_expired(e):
                message = "SSO 토큰이 거부되었습니다 - 다시 `aws sso login`을 실행하세요"
            else:
                message = "역할 자격증명 발급 실패"
            raise TokenExchangeError(profile.name, message, error_code=get_error_code(e), cause=e) from e
        except BotoCoreError as e:
            raise TokenExchangeError(profile.name, "SSO 포털 호출 실패", cause=e) from e

        role_credentials = response["roleCredentials"]
        credential = Credential(
            access_key_id=role_credentials["accessKeyId"],
            secret_access_key=role_credentials["secretAccessKey"],
            session_token=role_credentials["sessionToken"],
        )

        expires_at = token.expires_at
        expiration_ms = role_credentials.get("expiration")
        if expiration_ms:
            response_expiry = datetime.fromtimestamp(expiration_ms / 1000, tz=timezone.utc)
            expires_at = min(expires_at, response_expiry)

        return credential, expires_at
