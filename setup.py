# -*- coding: utf-8 -*-

from setuptools import setup, find_packages


setup(
    name="chip8sak",
    version="0.1.0",
    description="CHIP-8 interpreter, disassembler and headless runner with configurable quirks",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["chip8sak", "chip8sak.*"]),
    python_requires=">=3.8",
    install_requires=[
        "matplotlib",
        "more-itertools",
        "numpy",
        "parameterized",
    ],
    entry_points={"console_scripts": []},
    scripts=["tools/chip8Run.py", "tools/chip8Disasm.py"],
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: Developers",
        'License :: OSI Approved :: MIT License',
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
