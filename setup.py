#!/usr/bin/env python3
# setup.py：安装部署仓库同步工具
#
# 安装方式：
#   pip install -e .[test]
#
# 启动方式：
#   python main.py  或  deploy-repos-sync

from setuptools import setup, find_packages

# 读取 README.md 作为长描述
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Clone or update the repositories a multi-service deployment needs"

setup(
    name="deploy-repos-sync",
    version="1.0.0",
    author="qiao-925",
    description="Clone missing deployment repositories and safely pull existing ones",
    long_description=long_description,
    long_description_content_type="text/markdown",
    py_modules=["main"],
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "colorama>=0.4.6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "deploy-repos-sync=deploy_repos_sync.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Version Control :: Git",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
