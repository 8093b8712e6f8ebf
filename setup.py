from setuptools import setup, find_packages

setup(
    name="leaguetracker",
    version="0.1.0",
    description="Async tracker for league task progress of players and clans.",
    author="vainilie",
    packages=find_packages(exclude=["tests", "tests.*"]),  # Automatically discovers all packages and subpackages
    install_requires=[
        "httpx",
        "pydantic>=2",
        "pydantic-settings",
        "rich",
        "beautifulsoup4",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "leaguetracker=leaguetracker.__main__:run",  # Entry point for CLI
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
