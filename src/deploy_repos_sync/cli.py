# 命令行入口模块
#
# 主要功能：
#   - parse_args()：解析命令行参数（模式、工作区、超时等）
#   - main()：执行同步并返回退出码
#
# 退出码：
#   - 0：所有仓库目录都存在
#   - 1：有仓库缺失，或缺少 git
#   - 130：被 Ctrl-C 中断

import argparse
import signal
import sys
import time
from typing import List, Optional

from .application.execution import run_workspace_sync
from .core.errors import MissingDependencyError
from .core.git import LOCAL_TIMEOUT, NETWORK_TIMEOUT, GitCli
from .core.process_control import SyncCancelled, request_shutdown
from .domain.models import SyncMode
from .infra.logger import log_error, log_info, log_warning
from .infra.paths import resolve_workspace_dir

EXIT_OK = 0
EXIT_NOT_READY = 1
EXIT_CANCELED = 130


def validate_positive_int(value: str) -> int:
    """验证参数为正整数且 >= 1"""
    try:
        num = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"must be an integer: {value}")
    if num < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer >= 1: {value}")
    return num


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploy-repos-sync",
        description="Clone the deployment's repositories if missing, or pull the latest changes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s                 # clone missing repos, pull existing ones
  %(prog)s --pull          # same as above (default behavior)
  %(prog)s --clone-only    # only clone, never touch existing repos
  %(prog)s -w ../deploy    # manage repos under another directory
        """,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--pull',
        dest='pull_existing',
        action='store_true',
        default=True,
        help='clone missing repositories and update existing ones (default)',
    )
    mode.add_argument(
        '--clone-only',
        dest='pull_existing',
        action='store_false',
        help='only clone missing repositories, leave existing ones untouched',
    )

    parser.add_argument(
        '-w', '--workspace',
        default=None,
        metavar='DIR',
        help='directory holding the repositories (default: current directory)',
    )
    parser.add_argument(
        '--timeout',
        type=validate_positive_int,
        default=NETWORK_TIMEOUT,
        metavar='SECONDS',
        help=f'timeout for each clone/pull call (default: {NETWORK_TIMEOUT})',
    )
    parser.add_argument(
        '--skip-ssh-check',
        action='store_true',
        help='do not probe SSH access to the hosting service before syncing',
    )
    parser.add_argument(
        '--non-interactive',
        action='store_true',
        help='fail instead of prompting for credentials',
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    return build_parser().parse_args(argv)


def _handle_interrupt(signum, frame) -> None:
    log_warning("interrupt received, stopping after the current repository...")
    request_shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    """主函数

    Returns:
        退出码
    """
    args = parse_args(argv)
    workspace_dir = resolve_workspace_dir(args.workspace)
    mode = SyncMode(pull_existing=args.pull_existing)
    vcs = GitCli(
        network_timeout=args.timeout,
        local_timeout=LOCAL_TIMEOUT,
        non_interactive=args.non_interactive,
    )

    previous_handler = signal.signal(signal.SIGINT, _handle_interrupt)
    start_time = time.time()
    try:
        report = run_workspace_sync(
            workspace_dir,
            mode,
            vcs=vcs,
            ssh_check=not args.skip_ssh_check,
        )
    except MissingDependencyError as exc:
        log_error(f"✗ {exc}")
        return EXIT_NOT_READY
    except SyncCancelled as exc:
        log_error(str(exc))
        return EXIT_CANCELED
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    log_info(f"finished in {int(time.time() - start_time)}s")
    return EXIT_OK if report.all_present else EXIT_NOT_READY


if __name__ == '__main__':
    sys.exit(main())
