# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="p5-analysis",
    version="0.1.0",
    description="Static analysis of p5.js sketches: sketch detection, free variables and namespace members",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["p5analysis", "p5analysis.*"]),
    python_requires=">=3.9",
    install_requires=[
        "tree-sitter>=0.23",  # JavaScript parsing
        "tree-sitter-javascript>=0.23",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'p5analysis=p5analysis.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
