# 路径处理模块：解析工作区目录（各仓库克隆到的目录）

from pathlib import Path
from typing import Optional


def resolve_workspace_dir(workspace: Optional[str] = None) -> Path:
    """解析工作区目录

    未指定时使用当前工作目录（在 compose 文件所在目录执行）。
    相对路径按当前工作目录解析。
    """
    if not workspace:
        return Path.cwd().resolve()
    return Path(workspace).expanduser().resolve()
