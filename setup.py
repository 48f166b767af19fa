"""
secure-npm - interactive supply chain check for npm / yarn / pnpm projects

Finds the compromised package versions of the September 2025 npm incident
(chalk, debug, duckdb, prebid, ...) in package-lock.json, yarn.lock and
pnpm-lock.yaml, then removes, re-pins or overrides them.
"""

from setuptools import setup
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

# Read requirements
requirements = (this_directory / "requirements.txt").read_text(encoding='utf-8').splitlines()

setup(
    name="secure-npm",
    version="1.0.0",
    description="Detect compromised npm package versions in lockfiles and remediate them interactively",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=["scanners"],
    py_modules=[
        'advisories',
        'auto_fix',
        'cli',
        'config',
        'manifest',
        'package_manager',
        'registry',
        'remediation',
        'session_log',
        'theme',
        'versioning',
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Topic :: Security",
        "Topic :: Software Development :: Quality Assurance",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Environment :: Console",
    ],
    keywords=[
        "npm-security", "supply-chain-security", "lockfile", "yarn", "pnpm",
        "compromised-packages", "devsecops",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'secure-npm=cli:main',
        ],
    },
    zip_safe=False,
)
