from setuptools import setup, find_packages
from pathlib import Path


def read_readme():
    this_directory = Path(__file__).parent
    readme_file = this_directory / 'README.md'
    if readme_file.exists():
        return readme_file.read_text(encoding='utf-8')
    return ""


setup(
    name="s3loader",
    version="0.2.0",
    description="Resolve named code artifacts from Amazon S3 into fully materialized bytes with provenance.",
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['s3loader', 's3loader.*']),
    python_requires=">=3.11",
    install_requires=[
        "boto3>=1.28",
        "botocore>=1.31",
        "pydantic>=2.5",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="s3 boto3 artifact loader class loading object store",
)
