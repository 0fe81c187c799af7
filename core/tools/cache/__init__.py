"""
core/tools/cache - 공통 캐시 경로 관리

구조:
    ~/.cdk-cross-account/
    └── config.json      ← 프로파일별 임시 자격증명 캐시 (credentialCache)

    ~/.aws/sso/cache/    ← AWS CLI v2 SSO 토큰 (읽기 전용)
    ├── {sha1}.json
    └── botocore-client-*.json   (제외 대상)

사용법:
    from core.tools.cache import get_cache_path, get_sso_cache_dir

    cache_path = get_cache_path()
    # → ~/.cdk-cross-account/config.json
"""

__all__ = [
    "get_cache_dir",
    "get_cache_path",
    "get_sso_cache_dir",
    "CACHE_DIR_ENV",
    "SSO_CACHE_DIR_ENV",
    "CACHE_FILENAME",
]


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in __all__:
        from . import path

        return getattr(path, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
