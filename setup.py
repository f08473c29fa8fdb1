"""
Setup script for scrim-manager package with optional Cython compilation.

This builds the internal scrim core (_scrim/*.py) as compiled extensions
when Cython is available, while keeping the public API (errors.py,
types.py, cli.py) as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import glob
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    path for path in sorted(glob.glob("src/scrim_manager/_scrim/*.py"))
    if not path.endswith("__init__.py")
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        # Convert path to module name: src/scrim_manager/_scrim/foo.py -> scrim_manager._scrim.foo
        module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
        extensions.append(Extension(name=module_name, sources=[module_path]))
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={"language_level": "3"},
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="scrim-manager",
    version="1.0.0",
    description="Scrim lifecycle manager - recruiting, team building and match records for 5v5 practice games",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "scrim_manager._scrim": ["schema.sql", "*.so", "*.pyd"],
    },
    entry_points={
        "console_scripts": [
            "scrim-manager=scrim_manager.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
