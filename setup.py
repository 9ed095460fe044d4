# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
# 
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

from setuptools import setup

with open("ddmfpt/_version.py", "r") as f:
    exec(f.read())

with open("README.md", "r") as f:
    long_desc = f.read()


setup(
    name = 'ddmfpt',
    version = __version__,
    description = 'First-passage time densities of drift diffusion models',
    long_description = long_desc,
    long_description_content_type='text/markdown',
    license = 'MIT',
    python_requires='>=3.6',
    packages = ['ddmfpt'],
    install_requires = ['numpy >= 1.9.2', 'scipy >= 0.16', 'paranoid-scientist >= 0.2.1'],
    extras_require = {'test': ['pytest']},
    classifiers = [
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Scientific/Engineering :: Medical Science Apps.'],
)
