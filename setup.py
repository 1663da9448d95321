from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).parent
README = (BASE_DIR / "README.md").read_text(encoding="utf-8")

setup(
    name="beat-stats",
    version="0.1.0",
    description="Input that reads the HTTP monitoring endpoint of a Beat and reports flat metrics.",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Monitoring Stack",
    packages=find_packages(include=["beat_stats", "beat_stats.*"]),
    python_requires=">=3.9",
    include_package_data=True,
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn[standard]>=0.32.0",
        "requests>=2.32.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "beat-stats-service=beat_stats.main:main",
            "beat-stats-poller=beat_stats.poller:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
