# core/auth/config/strategy.py
"""
계정 → 자격증명 전략 매핑 (crossAccountConfig)

호스트 애플리케이션(CDK)이 프로젝트 설정에서 읽어 전달하는 매핑입니다:

    {
        "111111111111": {"profile": "dev"},
        "222222222222": {"profile": "prod-sso"}
    }

현재 인식하는 전략 옵션은 `profile` 하나뿐이며, 알 수 없는 키는 무시합니다.
매핑은 생성 후 변경되지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

from ..types import NoStrategyConfiguredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyDescriptor:
    """한 계정의 자격증명 해석 전략

    Attributes:
        profile: 사용할 AWS named profile 이름 (없으면 None)
    """

    profile: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StrategyDescriptor":
        """설정 딕셔너리에서 생성 (알 수 없는 키 무시)"""
        profile = data.get("profile")
        return cls(profile=str(profile) if profile else None)


class StrategyConfig:
    """계정 ID → StrategyDescriptor 불변 매핑"""

    def __init__(self, strategies: Optional[Mapping[str, StrategyDescriptor]] = None):
        self._strategies = MappingProxyType(dict(strategies or {}))

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "StrategyConfig":
        """crossAccountConfig 원본 매핑에서 생성

        Args:
            raw: {account_id: {"profile": name}} 형태의 매핑 (None이면 빈 설정)

        Returns:
            StrategyConfig
        """
        strategies = {}
        for account_id, value in (raw or {}).items():
            if not isinstance(value, Mapping):
                logger.warning("계정 %s의 전략 설정이 객체가 아니어서 무시합니다: %r", account_id, value)
                continue
            strategies[str(account_id)] = StrategyDescriptor.from_dict(value)

        if strategies:
            logger.debug("크로스 계정 설정 로드: %s", ", ".join(sorted(strategies)))
        return cls(strategies)

    def has(self, account_id: str) -> bool:
        """계정에 대한 전략이 설정되어 있는지 확인"""
        return account_id in self._strategies

    def get(self, account_id: str) -> StrategyDescriptor:
        """계정의 전략 조회

        Raises:
            NoStrategyConfiguredError: 계정에 대한 설정이 없는 경우
        """
        descriptor = self._strategies.get(account_id)
        if descriptor is None:
            raise NoStrategyConfiguredError(account_id)
        return descriptor

    def __len__(self) -> int:
        return len(self._strategies)

    def __bool__(self) -> bool:
        return bool(self._strategies)
