from setuptools import setup, find_packages
import os

# Read the long description from README.md if it exists
long_description = ""
if os.path.isfile("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name='aurora_field',
    version='0.1.0',
    packages=find_packages(include=['aurora_field', 'aurora_field.*']),
    description='Downsampling and rendering of OVATION aurora probability fields',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='GPLv3',
    keywords=['aurora', 'space weather', 'OVATION', 'geospatial', 'visualization'],

    # These are the runtime dependencies for your package:
    install_requires=[
        'numpy>=1.18.0',
        'matplotlib>=3.6.0',     # offset_transform keyword for collections
        'pandas>=1.0.0',
        'numba>=0.50.0',
        'PyYAML>=5.1',           # For config/*.yaml
        'requests>=2.20.0',      # For fetching the NOAA SWPC feed
    ],
    extras_require={
        'test': ['pytest>=6.0'],
    },
    entry_points={
        'console_scripts': ['aurora-field=aurora_field.cli:main'],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Topic :: Scientific/Engineering :: Atmospheric Science',
        'Topic :: Scientific/Engineering :: Visualization',
    ],

    python_requires='>=3.9',
    include_package_data=True,
    zip_safe=False,
)
