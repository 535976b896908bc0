import setuptools

setuptools.setup(
    name='kinetic',
    version='0.1.0',
    author='Matt Graham',
    description=(
        'Kinetic energy metrics for Hamiltonian Monte Carlo samplers'
    ),
    long_description=(
        'Kinetic is a Python package providing the kinetic energy metric '
        'component of Hamiltonian Monte Carlo (HMC) samplers: phase space '
        'points caching potential energy evaluations, unit, diagonal and '
        'dense Euclidean metrics defining the kinetic energy, its derivatives '
        'and momentum sampling, and a leapfrog integrator driving them.'
    ),
    packages=['kinetic'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Developers'
    ],
    keywords='inference sampling MCMC HMC',
    license='MIT',
    install_requires=['numpy>=1.17', 'scipy>=1.1'],
    python_requires='>=3.6',
    extras_require={
        'autodiff': ['autograd>=1.3'],
        'test': ['pytest>=6'],
    }
)
