# cli/ui - TUI 컴포넌트 (questionary, rich)
"""
TUI 컴포넌트 모듈

CLI 전용 UI 컴포넌트들 (MFA 입력, 콘솔 출력 등)
"""

# Direct imports (rich/questionary are commonly used, no lazy import needed)
from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    get_console,
    get_logger,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)
from .prompt import ask_mfa_code

__all__: list[str] = [
    "console",
    "get_console",
    "get_logger",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_table",
    "ask_mfa_code",
    "SYMBOL_SUCCESS",
    "SYMBOL_ERROR",
    "SYMBOL_WARNING",
    "SYMBOL_INFO",
]
