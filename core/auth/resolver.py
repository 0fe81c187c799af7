# core/auth/resolver.py
"""
크로스 계정 자격증명 해석 진입점 (Resolution Dispatcher)

호스트(CDK 등)는 계정 ID와 crossAccountConfig 매핑을 전달하고,
이 모듈은 계정에 설정된 전략(profile)으로 ProfileCredentialResolver에 위임합니다.

설정 매핑은 항상 인자로 전달받으며 인스턴스 상태로 보관하지 않습니다.
같은 프로파일에 대한 동시 해석은 프로파일 단위 잠금으로 직렬화하여
MFA 입력이나 STS/SSO 호출이 중복되지 않도록 합니다.

Usage:
    from core.auth.config import StrategyConfig
    from core.auth.resolver import create_resolver

    config = StrategyConfig.from_mapping({"111111111111": {"profile": "dev"}})
    resolver = create_resolver(token_code_fn=ask_mfa_code)

    if resolver.can_provide_credentials("111111111111", config):
        credential = resolver.resolve("111111111111", config)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from .cache.cache import CredentialCache
from .cache.sso_token import SSOTokenLocator
from .config.loader import ProfileStore
from .config.strategy import StrategyConfig
from .provider.profile import ProfileCredentialResolver
from .provider.sso import SSOCredentialResolver
from .types import Clock, Credential, NoStrategyConfiguredError, TokenCodeFn, utc_now

logger = logging.getLogger(__name__)


class CrossAccountResolver:
    """계정 ID → 자격증명 해석기

    Thread-safe 구현: 프로파일별 잠금으로 "캐시 확인 → 해석 → 캐시 기록"을 보호합니다.
    """

    def __init__(self, profile_resolver: ProfileCredentialResolver):
        """CrossAccountResolver 초기화

        Args:
            profile_resolver: named profile 기반 Resolver
        """
        self._profile_resolver = profile_resolver
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def is_available(self) -> bool:
        """Resolver 사용 가능 여부 (항상 True)"""
        return True

    def can_provide_credentials(self, account_id: str, config: StrategyConfig) -> bool:
        """계정에 대한 전략이 설정되어 있는지 확인

        Args:
            account_id: 대상 계정 ID
            config: crossAccountConfig 매핑

        Returns:
            True if 이 Resolver가 처리할 수 있는 계정
        """
        if config.has(account_id):
            logger.debug("계정 %s에 대한 크로스 계정 설정 발견", account_id)
            return True
        return False

    def resolve(self, account_id: str, config: StrategyConfig) -> Credential:
        """계정의 자격증명 해석

        Args:
            account_id: 대상 계정 ID
            config: crossAccountConfig 매핑

        Returns:
            Credential

        Raises:
            NoStrategyConfiguredError: 계정 설정이 없거나 인식 가능한 전략이 없는 경우
            AuthError: 하위 Resolver에서 발생한 해석 에러
        """
        descriptor = config.get(account_id)
        if not descriptor.profile:
            raise NoStrategyConfiguredError(account_id)

        with self._lock_for(descriptor.profile):
            return self._profile_resolver.resolve_with_profile(descriptor.profile, account_id)

    def _lock_for(self, profile_name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(profile_name)
            if lock is None:
                lock = self._locks[profile_name] = threading.Lock()
            return lock


def create_resolver(
    token_code_fn: Optional[TokenCodeFn] = None,
    cache: Optional[CredentialCache] = None,
    profile_store: Optional[ProfileStore] = None,
    token_locator: Optional[SSOTokenLocator] = None,
    sso_resolver: Optional[SSOCredentialResolver] = None,
    session_factory: Optional[Any] = None,
    clock: Clock = utc_now,
) -> CrossAccountResolver:
    """기본 구성요소로 CrossAccountResolver 생성

    Args:
        token_code_fn: (프로파일 이름, MFA 시리얼)을 받아 one-time code를 반환하는 함수
        cache: 자격증명 캐시 (기본: ~/.cdk-cross-account/config.json)
        profile_store: named profile 저장소 (기본: botocore 설정)
        token_locator: SSO 토큰 탐색기 (기본: ~/.aws/sso/cache)
        sso_resolver: SSO 토큰 교환 Resolver
        session_factory: boto3 Session 생성 함수
        clock: 현재 시각 함수

    Returns:
        CrossAccountResolver
    """
    kwargs: dict[str, Any] = {}
    if session_factory is not None:
        kwargs["session_factory"] = session_factory

    profile_resolver = ProfileCredentialResolver(
        cache=cache or CredentialCache(clock=clock),
        profile_store=profile_store or ProfileStore(),
        token_locator=token_locator or SSOTokenLocator(clock=clock),
        sso_resolver=sso_resolver or SSOCredentialResolver(),
        token_code_fn=token_code_fn,
        clock=clock,
        **kwargs,
    )
    return CrossAccountResolver(profile_resolver)
