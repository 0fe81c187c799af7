# core/__init__.py
"""
core - cdk-cross-account 자격증명 해석 인프라

아키텍처:
    core/
    ├── auth/           # 자격증명 해석 (캐시, 프로파일, SSO, dispatcher)
    ├── tools/cache/    # 캐시 경로 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.auth import StrategyConfig, create_resolver

    resolver = create_resolver()
    credential = resolver.resolve("111111111111", StrategyConfig.from_mapping(mapping))
"""

__version__ = "1.0.0"
