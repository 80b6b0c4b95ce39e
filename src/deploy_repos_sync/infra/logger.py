# 日志输出模块：提供统一的终端日志输出
#
# 主要功能：
#   - log_info() / log_step()：输出信息日志
#   - log_success()：输出成功日志
#   - log_warning()：输出警告日志
#   - log_error()：输出错误日志（stderr）
#   - print_banner() / print_rule()：输出横幅和分隔线
#
# 特性：
#   - 带时间戳
#   - 仅在终端中输出颜色（colorama 负责 Windows 兼容）

import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama
from colorama import Fore, Style

colorama.just_fix_windows_console()

COLOR_RESET = Style.RESET_ALL
COLOR_INFO = Fore.CYAN
COLOR_STEP = Fore.BLUE
COLOR_SUCCESS = Fore.GREEN
COLOR_ERROR = Fore.RED
COLOR_WARNING = Fore.YELLOW

RULE_WIDTH = 61


def _get_timestamp() -> str:
    """获取时间戳"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """终端（tty）才输出颜色"""
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _format_message(level: str, color: str, message: str, stream: Optional[TextIO] = None) -> str:
    """格式化日志消息"""
    timestamp = _get_timestamp()
    if supports_color(stream or sys.stdout):
        return f"{color}[{level}]{COLOR_RESET} [{timestamp}] {message}"
    return f"[{level}] [{timestamp}] {message}"


def log_info(message: str) -> None:
    """输出信息日志"""
    print(_format_message("INFO", COLOR_INFO, message))


def log_step(message: str) -> None:
    """输出步骤日志（每个仓库的处理起点）"""
    print(_format_message("STEP", COLOR_STEP, message))


def log_success(message: str) -> None:
    """输出成功日志"""
    print(_format_message("SUCCESS", COLOR_SUCCESS, message))


def log_error(message: str) -> None:
    """输出错误日志（输出到 stderr）"""
    print(_format_message("ERROR", COLOR_ERROR, message, sys.stderr), file=sys.stderr)


def log_warning(message: str) -> None:
    """输出警告日志"""
    print(_format_message("WARNING", COLOR_WARNING, message))


def colorize(text: str, color: str) -> str:
    """仅在终端中为文本着色"""
    if supports_color(sys.stdout):
        return f"{color}{text}{COLOR_RESET}"
    return text


def print_rule() -> None:
    """输出分隔线"""
    print("─" * RULE_WIDTH)


def print_banner(title: str, color: str = COLOR_STEP) -> None:
    """输出带边框的横幅"""
    inner = RULE_WIDTH - 2
    lines = [
        "╔" + "═" * inner + "╗",
        "║" + title.center(inner) + "║",
        "╚" + "═" * inner + "╝",
    ]
    print()
    for line in lines:
        print(colorize(line, color))
    print()
