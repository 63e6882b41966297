import os
import os.path
import setuptools # type: ignore

root_path = os.path.dirname(__file__)

with open(os.path.join(root_path, "README.md"), "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="gaslight",
    version="0.1.0",
    description="Gaslight: a runtime for interactive fiction with scenes, schedules and dates.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(where="src"),
    package_dir={'': 'src'},

    package_data={
        'gaslight': ['py.typed'],
        'gaslight.data': ['*'],
    },
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "numpy",
        "toml",
        "msgpack",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires='>=3.11',
    entry_points={
        'console_scripts': [
            'gaslight = gaslight.sim:main',
        ],
    },
)
