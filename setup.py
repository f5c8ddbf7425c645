from setuptools import setup

def read_file(fname):
    with open(fname, 'rt') as inf:
        return list(x.rstrip('\n\r') for x in inf if x.strip() and not x.startswith('#'))

def read_version(fname='VERSION'):
    with open(fname, 'rt') as inf:
        return inf.readline().strip()

setup(
    name='ngs_wrangling',
    version=read_version(),
    license='GPL-3.0-or-later',
    install_requires=read_file('requirements.txt'),
    description='Command-line filters for bulk segregant analysis, RNA-Seq and Ensembl data wrangling',
    packages=['util', 'tools'],
    py_modules=['bsa', 'ensembl', 'file_utils', 'rnaseq'],
    include_package_data=True,
    platforms='any',
    python_requires='>=3.8',
    extras_require={
        'ensembl': ['mysqlclient'],
        'test': ['pytest', 'mock'],
    }
)
