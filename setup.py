import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='f256ref',
    version='0.1.0',
    description='reference values and test data for binary256 arithmetic, computed with MPFR',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    python_requires='>=3.7',
    install_requires=['numpy>=1.23.0', 'gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    packages=['f256ref', 'f256ref.oracle', 'f256ref.arithmetic', 'f256ref.gen'],
    entry_points={
        'console_scripts': [
            'f256gen = f256ref.gen.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
