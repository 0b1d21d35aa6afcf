from setuptools import setup, find_packages

setup(
    name="linepatch",
    version="0.1.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
        # Whole-file deltas in the diff-match-patch format
        "diff-match-patch",
        # Interactive review of previews before writing
        "textual",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "linepatch=linepatch.cli:main",
        ],
    },
    description="Line-addressed file edits, previews and concurrent text search.",
)
