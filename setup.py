"""Install the people package."""

from setuptools import setup, find_packages

setup(
    name='people-accounts',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    python_requires='>=3.8',
    install_requires=[
        "click",
        "fastapi",
        "mimesis",
        "pydantic>=2",
        "pyjwt",
        "sqlalchemy>=1.4",
        "starlette",
        "werkzeug",
    ],
    extras_require={
        'test': [
            "httpx",
            "pytest",
            "pytest-asyncio",
        ]
    },
    zip_safe=False
)
