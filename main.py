#!/usr/bin/env python3
# 部署仓库同步脚本：确保部署所需的仓库都已克隆且为最新
#
# 主要功能：
#   - 缺失的仓库：克隆
#   - 已存在的 Git 仓库：暂存本地修改 -> 快进拉取（失败则变基）-> 恢复修改
#   - 已存在但不是 Git 仓库的目录：跳过
#   - 最后检查所有仓库目录是否存在，并输出后续步骤
#
# 用法：
#   python main.py               # 克隆缺失的仓库，更新已存在的仓库
#   python main.py --clone-only  # 只克隆，不更新已存在的仓库

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if SRC.is_dir() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from deploy_repos_sync.cli import main  # noqa: E402


if __name__ == '__main__':
    sys.exit(main())
