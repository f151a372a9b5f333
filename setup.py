from setuptools import setup

APP = 'mathsheet'
INSTALL_REQUIRES = [
    'fastapi',
    'pydantic',
    'uvicorn',
    'requests',
]
EXTRAS_REQUIRE = {
    'test': ['pytest', 'httpx'],
}

setup(
    name='MathSheet',
    version='1.0.0',
    description='Interactive multi-line math expression sheet backed by an evaluation service',
    packages=[APP],
    python_requires='>=3.9',
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        'console_scripts': [
            'mathsheet=mathsheet.cli:main',
            'mathsheet-server=mathsheet.api_server:main',
        ],
    },
)
