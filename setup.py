"""
The latest version of this package is available at:
<http://github.com/jantman/python-package-skeleton>

##################################################################################
Copyright 2017 Jason Antman <jason@jasonantman.com> <http://www.jasonantman.com>

    This file is part of python-package-skeleton, also known as python-package-skeleton.

    python-package-skeleton is free software: you can redistribute it and/or modify
    it under the terms of the GNU Affero General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    python-package-skeleton is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU Affero General Public License for more details.

    You should have received a copy of the GNU Affero General Public License
    along with python-package-skeleton.  If not, see <http://www.gnu.org/licenses/>.

The Copyright and Authors attributions contained herein may not be removed or
otherwise altered, except to add the Author attribution of a contributor to
this work. (Additional Terms pursuant to Section 7b of the AGPL v3)
##################################################################################
While not legally required, I sincerely request that anyone who finds
bugs please submit them at <https://github.com/jantman/python-package-skeleton> or
to me via email, and that you send any contributions or improvements
either as a pull request on GitHub, or to me via email.
##################################################################################

AUTHORS:
Jason Antman <jason@jasonantman.com> <http://www.jasonantman.com>
##################################################################################
"""

from setuptools import setup, find_packages
from bw_img.version import VERSION, PROJECT_URL

with open('README.rst') as file:
    long_description = file.read()

requires = [
    'numpy>=1.24',
    'pypng>=0.20220715.0',
    'pillow>=9.2.0',
]

extras_require = {
    # video decoding is optional; the codec itself never needs FFmpeg
    'video': ['av>=10.0.0'],
    'test': ['pytest>=7.0'],
}

classifiers = [
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'Natural Language :: English',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Multimedia :: Graphics :: Graphics Conversion',
]

setup(
    name='bw-img',
    version=VERSION,
    packages=find_packages(exclude=['tests', 'tests.*']),
    url=PROJECT_URL,
    description='Pack images and video frames into 1-bit BWIM bitmaps',
    long_description=long_description,
    python_requires='>=3.8',
    install_requires=requires,
    extras_require=extras_require,
    keywords="bitmap monochrome 1bpp image video codec",
    classifiers=classifiers,
)
