from pathlib import Path

from setuptools import find_packages, setup


with Path("requirements.txt").open() as requirements_file:
    install_requires = [line.strip() for line in requirements_file if line.strip() and not line.startswith("#")]

setup(
    name="training_programs",
    version="0.1.0",
    packages=find_packages(include=["training_programs", "training_programs.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require={
        "test": ["pytest", "httpx"],
    },
    entry_points={
        "console_scripts": [
            "training-programs-bot=training_programs.main:main",
        ],
    },
    python_requires=">=3.11",
)
