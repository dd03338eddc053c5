import os
from setuptools import setup
import glob
import subprocess


def get_revision():
    """
    Get the git revision of the code

    Returns:
    --------
    revision : string
        The string with the git revision
    """
    try:
        tmpout = subprocess.Popen(
            'cd ' + os.path.dirname(os.path.abspath(__file__)) +
            ' ; git log -n 1 --pretty=format:%H',
            shell=True,
            bufsize=80,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL).stdout
        revision = tmpout.read().decode()[:6]
        return revision
    except OSError:
        return ''


def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as fp:
        return fp.read()


VERSIONPIP = read('version.txt').rstrip()
revision = get_revision()
VERSION = VERSIONPIP
if revision != '':
    VERSION = VERSIONPIP + '.dev0+' + revision

with open('py/cubspline/_version.py', 'w') as fp:
    print('version="%s"' % (VERSION), file=fp)

setup(
    name="cubspline",
    version=VERSION,
    description=("Cubic spline interpolation with full, natural, periodic "
                 "and monotonic boundary conditions."),
    license="BSD",
    keywords="spline interpolation hermite monotonic",
    packages=['cubspline'],
    scripts=[fname for fname in glob.glob(os.path.join('bin', '*'))],
    package_dir={'': 'py/'},
    long_description=read('README.md'),
    long_description_content_type='text/markdown',
    python_requires='>=3.8',
    install_requires=['numpy', 'scipy', 'pyyaml', 'frozendict', 'matplotlib'],
    extras_require={'test': ['pytest']},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License :: OSI Approved :: BSD License",
    ],
)
