#!/usr/bin/env python3
"""
Setup script for Report Portal

Install with:
    pip install -e .

With test tooling:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

requirements = [
    "fastapi>=0.110.0",
    "uvicorn[standard]>=0.27.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "sqlalchemy[asyncio]>=2.0.25",
    "aiosqlite>=0.19.0",
    "python-jose[cryptography]>=3.3.0",
    "httpx>=0.26.0",
    "python-docx>=1.1.0",
    "python-pptx>=0.6.23",
    "Pillow>=10.2.0",
    "beautifulsoup4>=4.12.0",
]

setup(
    name="report-portal",
    version="1.0.0",
    description="Report Portal - work report board with aggregation and Word / PowerPoint export",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Report Portal Team",
    license="MIT",
    package_dir={"": "backend"},
    packages=find_packages(where="backend", include=["report_portal", "report_portal.*"]),
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "postgres": [
            "asyncpg>=0.29.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "faker>=22.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business",
    ],
    keywords="reports aggregation docx pptx fastapi",
)
