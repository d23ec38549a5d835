# setup.py
from setuptools import setup, find_packages

setup(
    name="ccode",
    version="0.1.0",
    description="Source printing and eval rewriting for a hosted script runtime",
    packages=find_packages(include=["ccode", "ccode.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
