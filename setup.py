# setup.py
from setuptools import setup, find_packages

setup(
    name="transaction-analytics",
    version="0.1.0",
    description="Sales transaction analytics dashboard: feed importer, JSON API and charts",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "webapp": ["templates/*.html", "static/*"],
    },
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "pyyaml>=5.3",
        "python-dotenv>=1.0",
        "fastapi>=0.110",
        "jinja2>=3.0",
        "uvicorn>=0.23",
        "anyio>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "txn-analytics=transaction_analytics.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
