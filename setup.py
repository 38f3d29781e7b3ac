from pathlib import Path
from setuptools import setup, find_packages

requirements = Path(__file__).with_name("requirements.txt").read_text().splitlines()

setup(
    name="dronesafe",
    version="0.1.0",
    description="Replay recorded multi-drone trajectories and flag speed and proximity violations",
    author="dronesafe contributors",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[r for r in requirements if r and not r.startswith("#")],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["dronesafe=dronesafe.cli:main"]},
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
