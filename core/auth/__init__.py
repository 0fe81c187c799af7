# core/auth/__init__.py
"""
크로스 계정 자격증명 해석 모듈 (core/auth)

계정 ID별로 설정된 AWS named profile을 사용해 임시 자격증명을 해석하고,
결과를 로컬 파일 캐시에 저장하여 만료 전까지 재사용합니다.

지원하는 해석 방식:
- assume-role 프로파일 (source_profile, MFA 포함)
- MFA 세션 토큰 (정적 키 + mfa_serial)
- SSO 프로파일 (AWS CLI v2 `aws sso login` 토큰 캐시 사용)

사용 예시:
    from core.auth import StrategyConfig, create_resolver

    config = StrategyConfig.from_mapping({
        "111111111111": {"profile": "dev"},
    })
    resolver = create_resolver(token_code_fn=ask_mfa_code)

    if resolver.can_provide_credentials("111111111111", config):
        credential = resolver.resolve("111111111111", config)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    실제 사용 시점에만 하위 모듈이 로드되어 CLI 시작 시간을 최적화합니다.
"""

__all__ = [
    # Types
    "Credential",
    "AuthError",
    "NoStrategyConfiguredError",
    "ProfileNotFoundError",
    "SSOCacheMissingError",
    "SSONotLoggedInError",
    "TokenExchangeError",
    "MFAPromptCancelledError",
    "CredentialAcquisitionError",
    # Cache
    "CachedCredential",
    "CredentialCache",
    "SSOToken",
    "SSOTokenLocator",
    # Config
    "ProfileAttributes",
    "ProfileStore",
    "StrategyConfig",
    "StrategyDescriptor",
    # Resolvers
    "ProfileCredentialResolver",
    "SSOCredentialResolver",
    "CrossAccountResolver",
    "create_resolver",
]

# Lazy import 매핑 테이블
_IMPORT_MAPPING = {
    # Types
    "Credential": (".types", "Credential"),
    "AuthError": (".types", "AuthError"),
    "NoStrategyConfiguredError": (".types", "NoStrategyConfiguredError"),
    "ProfileNotFoundError": (".types", "ProfileNotFoundError"),
    "SSOCacheMissingError": (".types", "SSOCacheMissingError"),
    "SSONotLoggedInError": (".types", "SSONotLoggedInError"),
    "TokenExchangeError": (".types", "TokenExchangeError"),
    "MFAPromptCancelledError": (".types", "MFAPromptCancelledError"),
    "CredentialAcquisitionError": (".types", "CredentialAcquisitionError"),
    # Cache
    "CachedCredential": (".cache", "CachedCredential"),
    "CredentialCache": (".cache", "CredentialCache"),
    "SSOToken": (".cache", "SSOToken"),
    "SSOTokenLocator": (".cache", "SSOTokenLocator"),
    # Config
    "ProfileAttributes": (".config", "ProfileAttributes"),
    "ProfileStore": (".config", "ProfileStore"),
    "StrategyConfig": (".config", "StrategyConfig"),
    "StrategyDescriptor": (".config", "StrategyDescriptor"),
    # Resolvers
    "ProfileCredentialResolver": (".provider", "ProfileCredentialResolver"),
    "SSOCredentialResolver": (".provider", "SSOCredentialResolver"),
    "CrossAccountResolver": (".resolver", "CrossAccountResolver"),
    "create_resolver": (".resolver", "create_resolver"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드

    CLI 시작 시간 최적화를 위해 무거운 의존성(boto3 등)을
    실제 필요한 시점에만 로드합니다.
    """
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
