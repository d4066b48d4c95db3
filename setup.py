from setuptools import setup, find_packages

setup(
    name='zcatalog',
    version='0.1.0',
    packages=find_packages(include=['zcatalog', 'zcatalog.*']),
    python_requires='>=3.8',
    install_requires=[
        'python-dotenv',
        'pymongo',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'zcatalog-demo=zcatalog.ebike_demo:main',
        ],
    },
    include_package_data=True,
    description='Seed a MongoDB parts catalog and render its documents with references resolved.',
    author='CentralFloridaAttorney',
)
