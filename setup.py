"""Setup configuration for browser-runner."""

from setuptools import setup, find_packages

setup(
    name="browser-runner",
    version="0.1.0",
    description="Run a spec suite in a real browser over WebDriver",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
        "selenium>=4.10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "browser-runner=browser_runner.cli:main",
        ],
    },
)
