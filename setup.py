from setuptools import find_packages, setup

"""
# Usage instructions
#
# To install the package
#   'pip install .'
#
# To install for development, with the test dependencies
#   'pip install -e .[test]'
"""

setup(
    name="perfbench",
    version="0.1.0",
    description="Micro-benchmark harness comparing candidate callables over randomized rounds",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "msgspec",
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "perfbench=perfbench.cli:main",
        ],
    },
)
