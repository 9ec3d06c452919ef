"""
Setup script for axon-engine.

Axon is the adaptive difficulty and session scoring engine behind a
short-session cognitive training game. It provides:

1. Adaptive pacing - game speed, phase and difficulty from answer latency
2. Session engine - classic and endless modes with a continue flow
3. Progress economy - scoring, XP, mastery and the ad frequency gate

The 'axon' command runs a terminal speed-math session and inspects progress.
"""

from setuptools import find_packages, setup

setup(
    name="axon-engine",
    version="1.0.0",
    description="Adaptive difficulty and session scoring engine for cognitive training games",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Axon",
    packages=find_packages(include=["axon", "axon.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "axon=axon.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
        "Topic :: Education",
    ],
    keywords="cognitive-training adaptive-difficulty game-engine cli",
)
