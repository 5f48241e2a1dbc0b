"""
Setup script for the tweaks coordinator package.
"""

from setuptools import setup, find_packages

setup(
    name="tweaks-coordinator",
    version="1.0.0",
    description="Ranked feature flag and tweak resolution across multiple configuration providers",
    author="Tweaks Team",
    packages=find_packages(include=["tweaks", "tweaks.*"]),
    python_requires=">=3.8",
    install_requires=[
        # Configuration
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",

        # Remote experiment provider
        "requests>=2.31.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
