# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

from setuptools import find_packages, setup

setup(
    name='pyresidual',
    version='0.1.0',
    maintainer='pyresidual developers',
    description='Residual filter evaluation against table partition values',
    keywords='partition pruning residual filter',
    python_requires='>=3.8',
    packages=find_packages(include=['pyresidual', 'pyresidual.*']),
    install_requires=['mmh3>=3.0.0',
                      'pydantic>=2.4,<3.0',
                      'pyparsing>=3.0.7',
                      'pyyaml>=5.4.0'
                      ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytz",
        ],
    },
    license="Apache License 2.0",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
