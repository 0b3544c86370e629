from setuptools import find_packages, setup

package_name = "kabsch_umeyama"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test", "test.*"]),
    data_files=[
        (
            "share/" + package_name + "/config",
            [
                "config/kabsch_umeyama.yaml",
            ],
        ),
    ],
    python_requires=">=3.8",
    install_requires=["numpy", "scipy", "pyyaml", "pydantic>=2"],
    extras_require={"test": ["pytest"]},
    zip_safe=True,
    description="Kabsch-Umeyama similarity transform estimation between corresponding point sets",
    license="Apache-2.0",
    entry_points={
        "console_scripts": [
            "kabsch-umeyama = kabsch_umeyama.cli:main",
        ],
    },
)
