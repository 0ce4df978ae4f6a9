"""
A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='heatctl',
    version='1.0.0',
    description='A thermostat controller for an electric heater with a remote threshold',
    long_description=long_description,
    long_description_content_type="text/markdown",
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Home Automation',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],

    packages=find_packages(exclude=['contrib', 'docs', 'test*']),

    python_requires='>=3.9',

    # The core has no run-time dependencies. The MQTT adapter
    # (heatctl.mqtt) needs paho-mqtt, install with: pip install heatctl[mqtt]
    install_requires=[],
    extras_require={
        'mqtt': ['paho-mqtt>=2.0'],
        'test': ['pytest', 'pytest-asyncio', 'paho-mqtt>=2.0'],
    },
)
