"""Setup file for the envbind package."""

from setuptools import setup, find_packages

setup(
    name="envbind",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pydantic>=2",
        "python-dotenv",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    author="Pimentel",
    author_email="pimentel@example.com",
    description="Load environment variables into typed dataclasses and pydantic models",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/pimentel/envbind",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
)
