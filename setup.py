from setuptools import setup

setup(
    name="swfloat",
    version="0.2.0",  # Match the version in swfloat/__init__.py
    description="Software binary floating point with configurable precision",
    package_data={"swfloat": ["py.typed"]},
    packages=["swfloat"],
    extras_require={
        "test": ["pytest", "numpy"],
        "examples": ["numpy"],
    },
    zip_safe=False,
    python_requires=">=3.7",
)
