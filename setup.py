# setup.py
from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

README = Path(__file__).with_name("README.md")
long_description = README.read_text(encoding="utf-8") if README.exists() else ""
PACKAGE_NAME = "airgrab"

install_requires = [
    "requests>=2.31",
    "PyYAML>=6.0",
    "pyperclip>=1.8",
    "typer>=0.9",
    "rich>=13.0",
    "appdirs>=1.4.4",
]

extras_require = {
    "tests": [
        "pytest>=8.4.1",
        "pytest-cov>=5.0.0",
    ],
    "dev": [
        "black>=24.3.0",
        "ruff>=0.4.0",
        "mypy>=1.8.0",
        "types-requests",
        "types-PyYAML",
        "build>=1.0.0",
    ],
}

setup(
    name=PACKAGE_NAME,
    version="0.1.0",
    description="Download Civitai models and preview images from AIR identifiers.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GPL-3.0-only",
    packages=find_packages(exclude=("tests", "tests.*", "docs", "examples")),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
    ],
    keywords=["civitai", "air", "urn", "stable-diffusion", "downloader", "clipboard"],
    entry_points={
        "console_scripts": [
            "airgrab=airgrab.cli.main:app",
        ],
    },
    zip_safe=False,
)
