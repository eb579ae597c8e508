from setuptools import setup, find_packages

setup(
    name='panelctl',
    version='0.1.0',
    packages=find_packages(exclude=['panelctl.tests']),
    include_package_data=True,
    install_requires=[
        'typer',
        'rich>=12.0',
        'fastapi',
        'uvicorn',
        'pydantic',
        'python-dotenv',
        'requests',
        'pyyaml',
        'jsonschema',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'panelctl=panelctl.cli:run'
        ]
    },
    description='CLI and API for reinstalling panel servers through their node daemons',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
