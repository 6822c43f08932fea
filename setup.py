#!/usr/bin/env python
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
import os
import re

from setuptools import setup

with open('src/oidcreg/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                        fd.read(), re.MULTILINE).group(1)

with open(os.path.join(os.path.dirname(__file__), 'README.md')) as readme:
    README = readme.read()

setup(
    name="oidcreg",
    version=version,
    description="OpenID Connect dynamic client registration for identity providers",
    long_description=README,
    long_description_content_type='text/markdown',
    license="Apache 2.0",
    packages=["oidcreg", "oidcreg/message", "oidcreg/message/oidc",
              "oidcreg/storage", "oidcreg/server", "oidcreg/server/oidc"],
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Libraries :: Python Modules"],
    install_requires=[
        "cryptojwt>=1.7.1",
        "filelock>=3.0.12",
        'pyyaml>=5.1.2',
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False,
)
