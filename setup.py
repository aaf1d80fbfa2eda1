"""Setup configuration for Coin Trade Monitor."""

from pathlib import Path

from setuptools import find_packages, setup

readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

install_requires = [
    "pydantic>=2.0",
    "pyyaml>=6.0",
    "python-dotenv>=1.0",
    "click>=8.1",
    "rich>=13.0",
    "tenacity>=8.2",
    "ccxt>=4.0",
    "opentelemetry-api>=1.20",
    "opentelemetry-sdk>=1.20",
]

extras_require = {
    "test": [
        "pytest>=7.4",
        "pytest-asyncio>=0.23",
    ],
}

setup(
    name="coin-trade-monitor",
    version="1.0.0",
    description="Scheduled price monitor that places threshold-triggered coin orders",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "ctm=coin_trade_monitor.cli.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
    ],
    keywords="trading cryptocurrency exchange monitor ccxt",
)
