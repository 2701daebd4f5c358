import setuptools

setuptools.setup(
    name="facetcheck",
    version="0.1.0",
    description="Sampling and Monte Carlo validation core for microfacet scattering models",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    package_data={"facetcheck": ["__init__.pyi"]},
    python_requires=">=3.9",
    install_requires=[
        "attrs>=22.2",
        "dynaconf>=3.2",
        "lazy_loader>=0.3",
        "numpy>=1.22",
        "pint>=0.22",
        "rich>=13.0",
        "scipy>=1.10",
        "tqdm>=4.64",
        "typer>=0.9",
        "typing_extensions>=4.6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["facetcheck=facetcheck.cli:main"],
    },
)
