# core/auth/config/__init__.py
"""
자격증명 해석 설정 모듈

- ProfileStore: ~/.aws/config 기반 named profile 조회 (botocore 위임)
- StrategyConfig: 계정 ID → 자격증명 전략(profile) 매핑

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Data classes
    "ProfileAttributes",
    "StrategyDescriptor",
    # Classes
    "ProfileStore",
    "StrategyConfig",
]

_IMPORT_MAPPING = {
    "ProfileAttributes": (".loader", "ProfileAttributes"),
    "ProfileStore": (".loader", "ProfileStore"),
    "StrategyDescriptor": (".strategy", "StrategyDescriptor"),
    "StrategyConfig": (".strategy", "StrategyConfig"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
