"""A setuptools based setup module.

See:
https://packaging.python.org/guides/distributing-packages-using-setuptools/
https://github.com/pypa/sampleproject
"""

from setuptools import setup
import pathlib

here = pathlib.Path(__file__).parent.resolve()

# Get the long description from the README file
long_description = (here / "README.md").read_text(encoding="utf-8")

setup(
    name="cdc-audit",
    version="0.1.0",
    description="Audit table and trigger generator for MySQL and MariaDB",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[  # Optional
        # How mature is this project? Common values are
        #   3 - Alpha
        #   4 - Beta
        #   5 - Production/Stable
        "Development Status :: 3 - Alpha",
        # Indicate who your project is intended for
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Topic :: Database",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3 :: Only",
    ],
    keywords="mysql, mariadb, audit, triggers, change-data-capture",
    packages=["cdc_audit"],
    install_requires=["SQLAlchemy>=2.0", "PyMySQL>=1.0"],
    extras_require={"test": ["pytest>=7"]},
    python_requires=">=3.8, <4",
    entry_points={
        "console_scripts": ["cdc-audit-gen=cdc_audit.__main__:run_cli"],
    },
)
