# 仓库克隆模块：克隆缺失的仓库
#
# 主要功能：
#   - clone_repository()：把描述符的远程仓库完整克隆到本地路径
#   - remove_partial_clone()：清理克隆失败留下的目录
#
# 特性：
#   - 只用于本地路径不存在的仓库（已存在的目录走更新流程）
#   - 失败时给出凭据/访问权限提示，并清理不完整的目录，保证下次运行仍会重新克隆

import platform
import shutil
import subprocess
from pathlib import Path
from typing import Tuple

from .process_control import hidden_window_kwargs
from .vcs import VersionControl
from ..domain.models import RepositoryDescriptor
from ..infra.logger import log_error, log_info, log_success, log_warning

ACCESS_HINT = "Make sure you have SSH access to the repository."


def remove_partial_clone(target_path: Path) -> None:
    """清理克隆失败留下的目录（Windows 兼容）"""
    if not target_path.is_dir():
        return

    try:
        shutil.rmtree(target_path)
    except OSError as exc:
        # Windows 下文件被占用时 rmtree 会失败，改用 rmdir 强制删除
        if platform.system() == 'Windows':
            subprocess.run(
                ['cmd.exe', '/c', 'rmdir', '/s', '/q', str(target_path)],
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=10,
                **hidden_window_kwargs(),
            )
        if target_path.exists():
            log_warning(f"could not remove partial clone {target_path}: {exc}")


def clone_repository(descriptor: RepositoryDescriptor, vcs: VersionControl) -> Tuple[bool, str]:
    """克隆单个仓库

    Args:
        descriptor: 仓库描述符
        vcs: 版本控制能力接口

    Returns:
        (是否成功, 说明)
    """
    target_path: Path = descriptor.local_path
    log_info(f"cloning {descriptor.name}...")

    result = vcs.clone(descriptor.remote, target_path)
    if not result.ok:
        log_error(f"failed to clone {descriptor.name} ({result.describe()})")
        log_error(f"  {ACCESS_HINT}")
        return False, f"clone failed: {result.describe()}. {ACCESS_HINT}"

    # 克隆命令成功但目录不是工作副本：删除目录，让就绪检查与结果一致
    if not vcs.is_working_copy(target_path):
        log_error(f"clone of {descriptor.name} did not produce a working copy at {target_path}")
        remove_partial_clone(target_path)
        return False, f"clone finished but {target_path} is not a working copy"

    log_success(f"successfully cloned {descriptor.name}")
    return True, f"cloned from {descriptor.remote}"
