from setuptools import setup, find_packages


setup(
    name='torch_spcg',
    version='0.1.0',
    packages=find_packages(include=['torch_spcg', 'torch_spcg.*']),
    python_requires='>=3.8',
    install_requires=[
        'torch>=1.13.0',
    ],
    extras_require={
        'test':['pytest','numpy','scipy'],
        'docs':['sphinx']
    }
)
