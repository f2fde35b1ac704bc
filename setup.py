from setuptools import setup, find_packages

setup(
    name="suggestion_patcher",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "suggestion-patcher=suggestion_patcher.cli:main",
        ],
    },
    description="Apply review bot suggested changes to files by line range.",
)
