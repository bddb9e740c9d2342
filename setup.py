from setuptools import setup, find_packages

from os import path
this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='bcp47_tags',
    version='1.0.0',
    description='Validates BCP 47 language tags against the IANA language subtag registry.',
    long_description_content_type='text/markdown',
    long_description=long_description,
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'bcp47_tags': ['logging.toml', 'data/*.txt']},
    python_requires='>=3.10',
    install_requires=open(path.join(this_directory, 'requirements.txt')).readlines(),
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['bcp47-tags=bcp47_tags.__main__:main']},
)
