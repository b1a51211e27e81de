import os
from setuptools import setup, find_packages

HERE = os.path.realpath(os.path.dirname(__file__))

VERSION_MODULE_PATH = os.path.join(HERE, "shuntyard", "version.py")
README_PATH = os.path.join(HERE, "README.md")


def get_version_string():
    version = {}
    with open(VERSION_MODULE_PATH) as f:
        exec(f.read(), version)
    return version['VERSION_STRING']


def get_readme():
    with open(README_PATH, encoding='utf-8') as f:
        return f.read()


setup(
    name='shuntyard',
    description='Parse infix mathematical expressions once and evaluate them repeatedly with different variables.',
    license="LGPL-3.0-or-later",
    long_description=get_readme(),
    long_description_content_type="text/markdown",
    version=get_version_string(),
    packages=find_packages(exclude=['test']),
    python_requires='>=3.7',
    install_requires=[
        'colorama',
        'json5',
        'numpy>=1.19.4',
        'PyYAML',
        'tqdm',
        'typing_extensions>=3.7.4.3'
    ],
    entry_points={
        'console_scripts': [
            'shuntyard = shuntyard.__main__:main'
        ]
    },
    extras_require={
        "dev": ["flake8", "pytest"]
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Scientific/Engineering :: Mathematics'
    ],
    include_package_data=True
)
