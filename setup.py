from setuptools import setup, find_packages

setup(
    name="mise",
    version="1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    description=(
        "Ingredient and timeline extraction from recipe markdown, "
        "and meal snapshot assembly."
    ),
    install_requires=["marko>=2.0", "lxml>=4.6", "PyYAML>=5.4"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "mise-render=mise.scripts.mise_render:main",
            "mise-lint=mise.scripts.mise_lint:main",
            "mise-snapshot=mise.scripts.mise_snapshot:main",
        ],
    },
)
