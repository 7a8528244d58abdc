"""groundloop setup - Grounded selection and learning loop."""
from setuptools import setup, find_packages

setup(
    name="groundloop",
    version="0.1.0",
    description="groundloop: Grounded selection and learning loop",
    packages=find_packages(include=["groundloop", "groundloop.*", "groundloop_cli", "groundloop_cli.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "blake3>=0.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ground=groundloop_cli.main:cli",
        ],
    },
)
