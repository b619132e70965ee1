from setuptools import setup, find_packages

setup(
    name="zkecc_package",
    version="0.1.0",
    description="A package to constrain elliptic curve arithmetic over foreign fields in arithmetic circuits",
    url="https://github.com/yourusername/zkecc_package",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=["ECPy"],
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
)
