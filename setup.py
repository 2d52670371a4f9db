from setuptools import setup, find_packages

setup(
    name="convsplit",
    version="0.1.0",
    description="CPU/GPU row-split planner for 2D convolution",
    author="convsplit Team",
    packages=find_packages(exclude=["tests*", "examples*"]),
    package_data={"configs": ["*.yaml"]},
    install_requires=[
        "numpy>=1.24.0",
        "pyyaml>=6.0",
        "matplotlib>=3.7.0",
        "seaborn>=0.12.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "convsplit=convsplit.main:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
