# setup.py

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name='jitbench',
    version='0.1.0',
    description='A micro-benchmark harness for comparing interpreter and JIT execution paths',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['jitbench', 'jitbench.*']),
    install_requires=['numpy'],
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': ['jitbench=jitbench.tools.bench_cli:main'],
    },
    zip_safe=False,
    python_requires='>=3.7',
)
