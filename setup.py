from setuptools import setup, find_packages

setup(
    name="rewardjar",
    version="0.1",
    packages=find_packages(include=["rewardjar", "rewardjar.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "pydantic>=2",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
        "httpx",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
