from setuptools import setup, find_packages

setup(
    name="pnginfo_tools",
    version="0.1.0",
    author="pnginfo_tools contributors",
    description="Decode dimensions, text annotations and chunk layout from PNG files",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "benchmarks", "benchmarks.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pillow>=11.1.0",
    ],
    extras_require={
        "benchmark": [
            "numpy>=2.2.3",
            "psutil>=7.0.0",
        ],
        "test": [
            "pytest>=8.3.4",
            "numpy>=2.2.3",
        ],
        "dev": [
            "pytest>=8.3.4",
            "pytest-cov>=6.0.0",
            "coverage>=7.6.12",
            "numpy>=2.2.3",
            "psutil>=7.0.0",
        ],
    },
)
