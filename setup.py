from setuptools import setup, find_packages

__version__ = '1.0.0'

requirements = [
    'coloredlogs>=15.0',
    'iso8601>=1.0',
    'pymongo>=4.0',
    'sanic>=22.12',
]

test_requirements = [
    'pytest>=7.0',
    'sanic-testing>=22.12',
]

setup(
    name='nftregistry',
    version=__version__,
    description='Non-fungible token registry: id allocation, ownership, approvals and metadata over a key-value store.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    zip_safe=True,
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'nftregistry-server=nftregistry.webserver:start_webserver',
        ],
    },
)
