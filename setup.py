from setuptools import setup, find_packages

setup(
    name='tilelevel',
    version='0.1.0',
    author='Virgil',
    author_email='virgil@example.com',
    description='Decode Tiled-style and area-format JSON levels for tile-based games',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/example/tilelevel',
    packages=find_packages(include=['tilelevel', 'tilelevel.*']),
    install_requires=[
        'numpy>=1.20.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tilelevel=tilelevel.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'License :: Other/Proprietary License',
        'Operating System :: OS Independent',
        'Topic :: Games/Entertainment',
    ],
    python_requires='>=3.8',
    include_package_data=True,
    package_data={
        'tilelevel': ['py.typed'],
    },
)
