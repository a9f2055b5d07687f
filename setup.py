from setuptools import setup, find_packages

setup(
    name="workflow-service",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "sqlalchemy[asyncio]>=2.0",
        "asyncpg",
        "pydantic>=2.5",
        "strawberry-graphql[fastapi]",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
            "aiosqlite",
        ],
    },
)
