from setuptools import setup, find_packages

setup(
    name='kubeprep',
    version='0.1.0',
    packages=find_packages(exclude=['kubeprep.tests', 'kubeprep.tests.*']),
    include_package_data=True,
    install_requires=[
        'typer[all]',
        'fastapi',
        'uvicorn',
        'python-dotenv',
        'pydantic>=2',
        'pyyaml',
        'packaging',
        'paramiko',
        'tenacity',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'kubeprep=kubeprep.cli:app'
        ]
    },
    author='Your Name',
    description='Prepare RPM based Linux hosts to join a Kubernetes cluster',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
