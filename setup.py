from setuptools import setup, find_packages


def _read_requirements(path):
    with open(path) as fp:
        return [
            line.strip() for line in fp.readlines()
            if line.strip() and not line.startswith('#')
        ]


setup(
    name='cloudstore',
    version='1.0',
    description="Resilient access layer for Google Cloud Datastore",
    long_description="""""",
    author='Jon Trowbridge, Kumar McMillan',
    author_email='kumar.mcmillan@gmail.com',
    license="Apache License",
    packages=find_packages(exclude=['ez_setup']),
    install_requires=_read_requirements('requirements/prod.txt'),
    extras_require={
        'test': _read_requirements('requirements/dev.txt'),
    },
    url='',
    include_package_data=True,
    entry_points="""
       [console_scripts]

       do_dump_kind = cloudstore.datastore.do_dump_kind:main
       """,
    classifiers=[],
    )
