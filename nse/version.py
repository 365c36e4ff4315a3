# nse/version.py
"""
NSE Toolkit Version Information

Centralises the version number and package metadata, accessible
programmatically via ``nse.__version__``.

The toolkit follows semantic versioning (MAJOR.MINOR.PATCH).
"""

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "NSE Toolkit"
__description__ = "Numerical standard errors of sample means of dependent series"
__license__ = "MIT"

# Python version requirements
__python_requires__ = ">=3.10"

# Package dependencies
__dependencies__ = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
    "statsmodels": ">=0.14.0",
}
