from setuptools import setup, find_packages

setup(
    name='siwe-auth',
    version='0.1.0',
    project_urls={
        'EIP-4361': 'https://github.com/ethereum/EIPs/blob/master/EIPS/eip-4361.md'
    },
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    license='MIT',
    description='Sign-In with Ethereum (EIP-4361) challenge construction and verification.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires='>=3.9',
    install_requires=[
        'eth-account>=0.8',
        'eth-keys',
        'eth-utils>=2',
        'pydantic>=2',
        'pydantic-settings>=2.1',
        'requests',
        'typing-extensions',
        'web3>=7',
    ],
    extras_require={
        'test': [
            'hexbytes',
            'pytest',
            'pytest-asyncio',
            'python-dateutil',
        ],
    },
)
