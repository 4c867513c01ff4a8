from setuptools import find_packages, setup

setup(
    name="ocunit2junit",
    version="0.1.0",
    author="Kim Gustyr",
    author_email="khvn26@gmail.com",
    entry_points={"console_scripts": ["ocunit2junit = ocunit2junit.cli:main_entry"]},
    packages=find_packages(
        include=["*"],
        exclude=["tests*"],
    ),
    python_requires=">=3.8.1",
    install_requires=[
        "pydantic",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
)
