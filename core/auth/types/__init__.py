# core/auth/types/__init__.py
"""
크로스 계정 인증 모듈의 공통 타입 및 에러 정의

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Data classes
    "Credential",
    # Helpers
    "Clock",
    "TokenCodeFn",
    "utc_now",
    # Errors
    "AuthError",
    "NoStrategyConfiguredError",
    "ProfileNotFoundError",
    "SSOCacheMissingError",
    "SSONotLoggedInError",
    "TokenExchangeError",
    "MFAPromptCancelledError",
    "CredentialAcquisitionError",
]

_IMPORT_MAPPING = {
    "Credential": (".types", "Credential"),
    "Clock": (".types", "Clock"),
    "TokenCodeFn": (".types", "TokenCodeFn"),
    "utc_now": (".types", "utc_now"),
    "AuthError": (".types", "AuthError"),
    "NoStrategyConfiguredError": (".types", "NoStrategyConfiguredError"),
    "ProfileNotFoundError": (".types", "ProfileNotFoundError"),
    "SSOCacheMissingError": (".types", "SSOCacheMissingError"),
    "SSONotLoggedInError": (".types", "SSONotLoggedInError"),
    "TokenExchangeError": (".types", "TokenExchangeError"),
    "MFAPromptCancelledError": (".types", "MFAPromptCancelledError"),
    "CredentialAcquisitionError": (".types", "CredentialAcquisitionError"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
