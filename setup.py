from glob import glob
from setuptools import setup


setup(
    name='unitrpn',
    version='0.1.0',
    description='Unit-aware RPN calculator',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['unitrpn'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
