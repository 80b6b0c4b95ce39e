# SSH 访问检查模块：克隆前的提示性检查
#
# 主要功能：
#   - check_ssh_access()：检测能否通过 SSH 认证到代码托管主机
#
# 注意：检查结果仅用于提示，失败不会阻止后续克隆/更新

import subprocess
from typing import Tuple

from .process_control import hidden_window_kwargs

SSH_TIMEOUT = 10


def check_ssh_access(host: str, timeout: int = SSH_TIMEOUT) -> Tuple[bool, str]:
    """检测 SSH 访问

    Args:
        host: SSH 目标（格式：user@host）
        timeout: 超时时间（秒）

    Returns:
        (是否认证成功, 输出摘要)
    """
    try:
        result = subprocess.run(
            ['ssh', '-o', 'BatchMode=yes', '-o', f'ConnectTimeout={timeout}', '-T', host],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            timeout=timeout + 5,
            **hidden_window_kwargs(),
        )
    except subprocess.TimeoutExpired:
        return False, "ssh check timed out"
    except (FileNotFoundError, subprocess.SubprocessError) as exc:
        return False, f"ssh check failed: {exc}"

    # GitHub 认证成功时也会返回非 0（不提供 shell），因此只看输出
    output = result.stdout.decode(errors="replace") + result.stderr.decode(errors="replace")
    if 'successfully authenticated' in output:
        return True, output.strip().splitlines()[0] if output.strip() else ""
    summary = output.strip().splitlines()[0] if output.strip() else f"exit code {result.returncode}"
    return False, summary
