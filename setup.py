from setuptools import setup, find_packages

setup(
    name="cq_harness",
    version="0.1.0",
    description="Test instrumentation for continuous query listeners",
    packages=find_packages(include=["cq_harness", "cq_harness.*"]),
    install_requires=[
        # Core dependencies
        "pydantic>=2.5.2",
        "pyee>=11.0.1",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        # Testing
        "test": [
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
        ],
    },
    python_requires=">=3.11",
)
