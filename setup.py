"""Setup script for gsheet_automator package."""

from setuptools import setup, find_packages

# Read long description from README
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Sheet-driven mail merge and Drive copy utilities for Google Workspace"

# Dependencies - hardcoded to avoid FileNotFoundError during build
install_requires = [
    "gspread>=5.0.0",
    "google-auth>=2.0.0",
    "google-auth-httplib2>=0.1.0",
    "google-api-python-client>=2.0.0",
]

setup(
    name="gsheet_automator",
    version="0.1.0",
    author="",  # Add your name or organization here
    author_email="",  # Add your email here
    description="Sheet-driven mail merge and Drive copy utilities for Google Workspace",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",  # Update if using a different license
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=install_requires,
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "gsheet_automator=gsheet_automator.cli:main",
        ],
    },
)
