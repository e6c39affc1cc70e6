"""
Setup script for tiny-bloom.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-bloom",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={"tiny_bloom": ["py.typed"]},
    python_requires=">=3.9",
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["tiny-bloom=tiny_bloom.__main__:main"]},
)
