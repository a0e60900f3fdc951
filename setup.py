from setuptools import setup, find_packages
import re

# Read version from benecalc/__init__.py
with open('benecalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='benecalc',
    version=version,
    packages=find_packages(include=['benecalc', 'benecalc.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bene-calc=benecalc.cli.__main__:main',
            'bene-calc-mcp=benecalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Employee benefits cost calculator.',
    python_requires='>=3.10',
)
