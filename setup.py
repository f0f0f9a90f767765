"""
Setup script for the rally-score package.

Installs the rally_score scoring core from the src/ layout, with the
`rally-score` console entry point for the CLI.
"""

from setuptools import setup, find_packages

setup(
    name="rally-score",
    version="1.0.0",
    description="Match result lifecycle, score permissions and DUPR eligibility for racquet-sport events",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "rally-score=rally_score.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
