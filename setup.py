"""
Setup script for the multipart form encoder.
"""
from setuptools import setup, find_namespace_packages

setup(
    name="multipart-encoder",
    version="1.0.0",
    description="Type-driven encoding of records into multipart/form-data parts",
    author="Your Name",
    packages=find_namespace_packages(include=["encoder*", "writer*", "client*", "utils*"]),
    py_modules=["config", "main", "verify_output"],
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=1.26",
        "requests-toolbelt>=1.0.0",
        "tenacity>=8.2.3",
        "python-dotenv>=1.0.0",
        "tqdm>=4.66.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
