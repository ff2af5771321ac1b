from setuptools import setup

setup(
    name="sdf_tools",
    version="0.1.0",
    description="Convert SD files into CSV tables with RDKit Smiles.",
    license="MIT",
    packages=["sdf_tools"],
    scripts=["python_scripts/sdf_to_csv.py"],
    install_requires=[
        "rdkit",
        "pandas>=1.5",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 1 - Planning",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
)
