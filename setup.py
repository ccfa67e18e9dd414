from setuptools import setup, find_packages

setup(
    name="clipboard_manager",
    version="1.0.0",
    package_dir={"": "modules"},
    packages=find_packages(where="modules"),
    description="Cut, copy, and paste files, directories, and text from the terminal.",
    author="Max Carlson",
    author_email="carlsonamax@gmail.com",
    url="https://github.com/MaxCarlson/scripts",
    install_requires=[
        "rich",
        "pyyaml",
        "pydantic>=2",
        "psutil",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "cb=clipboard_manager.cli:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
