from setuptools import setup, find_packages

setup(
    name="extman",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=[
        "click",
        "colorama",
        "packaging",
        "pydantic>=2",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "extman=main:main",
        ],
    },
)
