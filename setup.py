"""Smart Calculator - LLM-backed terminal calculator."""
from setuptools import setup, find_packages

setup(
    name="smart-calculator",
    version="1.0.0",
    description="Terminal calculator that delegates math to a Gemini model",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "smart_calculator": ["templates/*"],
    },
    install_requires=[
        "click>=8.1.0",
        "jinja2>=3.1.0",
        "rich>=13.0.0",
        "questionary>=2.0.0",
        "google-genai>=1.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "smart-calculator=smart_calculator.cli:main",
            "scalc=smart_calculator.cli:main",  # Short alias
        ],
    },
    python_requires=">=3.10",
)
