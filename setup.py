"""Setup script for Shorts Ranker."""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="shorts-ranker",
    version="0.1.0",
    description="Compile five ranked clips into a narrated vertical countdown video",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["shorts_ranker", "shorts_ranker.*"]),
    install_requires=[
        "click>=8.1.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "openai>=1.12.0",
        "anthropic>=0.18.0",
        "elevenlabs>=1.0.0",
        "edge-tts>=6.1.0",
        "requests>=2.31.0",
        "colorama>=0.4.6",
        "flask>=3.0.0",
        "flask-cors>=4.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "shorts-ranker=shorts_ranker.cli.app:cli",
            "shorts-ranker-server=shorts_ranker.server.app:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Video",
    ],
    keywords="video shorts countdown ranking narration text-to-speech ffmpeg",
)
