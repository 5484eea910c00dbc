"""
Setup script for dup-tx-checker.
"""
import pathlib

from setuptools import find_packages, setup


def read_requirements(path):
    with pathlib.Path(path).open() as requirements_txt:
        return [
            line.strip()
            for line in requirements_txt
            if line.strip() and not line.lstrip().startswith("#")
        ]


install_requires = read_requirements("requirements.txt")
dev_requires = read_requirements("dev-requirements.txt")

setup(
    name="dup_tx_checker",
    version="0.1.0",
    description="Scan Muta chain blocks and stop on the first duplicate transaction hash",
    packages=find_packages(where="src"),
    package_dir={
        "": "src",
    },
    include_package_data=True,
    zip_safe=False,
    install_requires=install_requires,
    extras_require={"dev": dev_requires},
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "dup-tx-checker=dup_tx_checker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
