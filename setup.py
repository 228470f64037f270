# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="nestedtags",
    version="1.0.0",
    description="Live hierarchical index of the nested tags declared in workspace documents",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["nestedtags", "nestedtags.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'nestedtags=nestedtags.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
