import os

from setuptools import find_packages, setup

VERSION = '0.1.0'


def parse_md_readme():
    """
    use the markdown readme as the long description when it is present
    """
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'README.md')) as fh:
            return fh.read()
    except OSError:
        return ''


TEST_REQS = [
    'pycodestyle>=2.3.1',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'Distance>=0.1.3',
    'biopython>=1.78',
    'braceexpand==0.1.2',
    'pandas>=1.1',
    'shortuuid>=0.5.0',
]


setup(
    name='fusepoint',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages(where='src', exclude=['tests']),
    description='Consensus and local refinement of split-read breakpoint calls',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS,
    },
    python_requires='>=3.7',
    entry_points={
        'console_scripts': [
            'fusepoint = fusepoint.main:main',
        ]
    },
)
