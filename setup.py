from setuptools import setup


with open('README.rst', 'r') as f:
    # skip the banners
    lines = f.readlines()[6:]
    long_desc = ''.join(lines)

setup(
    name='sparselap',
    version='0.1.0',
    description='Sparse linear assignment problem solver with warm-start re-optimization',
    long_description=long_desc,
    long_description_content_type='text/x-rst',
    license='LGPL-3.0-or-later',
    packages=['sparselap'],
    install_requires=[
        'numpy>=1.9',
        'scipy>=1.0.0',
    ],
    python_requires='>=3.9'
)
