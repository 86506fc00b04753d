#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Setup configuration for the campaign lifecycle service.
"""

from setuptools import setup, find_namespace_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="campaign-lifecycle-service",
    version="1.0.0",
    author="isA Platform",
    author_email="dev@isa-platform.com",
    description="Donation campaign status lifecycle service with scheduled sweeps",
    long_description=long_description,
    long_description_content_type="text/markdown",
    # microservices/ is a namespace directory without __init__.py
    packages=find_namespace_packages(include=["core", "core.*", "microservices", "microservices.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "asyncpg>=0.29.0",  # PostgreSQL async client
        "nats-py>=2.6.0",  # NATS / JetStream client
        "apscheduler>=3.10,<4",  # Cron scheduling for lifecycle sweeps
        "python-dotenv>=1.0.0",
        "tzdata>=2023.3",  # IANA zones for zoneinfo on hosts without them
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0",  # FastAPI TestClient
        ],
    },
    entry_points={
        "console_scripts": [
            "campaign-service=microservices.campaign_service.main:main",
        ],
    },
)
