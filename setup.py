from setuptools import setup, find_packages

setup(
    name="payout_breakdown",
    version="0.1.0",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "pandas>=2.0,<3",
        "numpy",
        "openpyxl",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-dependency",
        ],
    },
    entry_points={
        "console_scripts": [
            "payout-breakdown=payout_breakdown.reconcile:main",
        ],
    },
    author="Price Hatfield",
    description="A tool for breaking marketplace transaction exports down by payout and reconciling them",
    python_requires=">=3.9",
)
