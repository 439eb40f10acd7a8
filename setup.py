#
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
"""Setup.py for the spanner-database-admin project."""
import glob
import logging
import os
from os.path import dirname
from typing import Dict, List

from setuptools import Command, find_packages, setup

logger = logging.getLogger(__name__)

version = '1.0.0'

my_dir = dirname(__file__)


class CleanCommand(Command):
    """
    Command to tidy up the project root.
    Registered as cmdclass in setup() so it can be called with ``python setup.py extra_clean``.
    """

    description = "Tidy up the project root"
    user_options: List[str] = []

    def initialize_options(self) -> None:
        """Set default values for options."""

    def finalize_options(self) -> None:
        """Set final values for options."""

    @staticmethod
    def rm_all_files(files: List[str]) -> None:
        """Remove all files from the list"""
        for file in files:
            try:
                os.remove(file)
            except Exception as e:
                logger.warning("Error when removing %s: %s", file, e)

    def run(self) -> None:
        """Remove temporary files and directories."""
        os.chdir(my_dir)
        self.rm_all_files(glob.glob('./build/*'))
        self.rm_all_files(glob.glob('./**/__pycache__/*', recursive=True))
        self.rm_all_files(glob.glob('./**/*.pyc', recursive=True))
        self.rm_all_files(glob.glob('./dist/*'))
        self.rm_all_files(glob.glob('./*.egg-info'))


class ListExtras(Command):
    """
    List all available extras
    Registered as cmdclass in setup() so it can be called with ``python setup.py list_extras``.
    """

    description = "List available extras"
    user_options: List[str] = []

    def initialize_options(self) -> None:
        """Set default values for options."""

    def finalize_options(self) -> None:
        """Set final values for options."""

    def run(self) -> None:
        """List extras."""
        print("\n".join(sorted(EXTRAS_REQUIREMENTS)))


def get_long_description() -> str:
    """Read the README next to this file, if there is one."""
    readme = os.path.join(my_dir, 'README.md')
    if not os.path.isfile(readme):
        return ''
    with open(readme, encoding='utf-8') as file:
        return file.read()


google = [
    'google-api-core>=2.11.0,<3.0.0',
    'google-auth>=2.0.0,<3.0.0',
    'google-cloud-spanner>=3.0.0,<4.0.0',
    'grpc-google-iam-v1>=0.12.4,<1.0.0',
    'grpcio>=1.15.0',
    'protobuf>=3.20.0',
]

install_requires = google + [
    'google-re2>=1.0',
]

devel = [
    'pytest>=7.0',
    'pytest-cov',
]

EXTRAS_REQUIREMENTS: Dict[str, List[str]] = {
    'devel': devel,
}


def do_setup() -> None:
    """Perform the spanner-database-admin package setup."""
    setup(
        name='spanner-database-admin',
        version=version,
        description='Hooks for the Google Cloud Spanner database admin API',
        long_description=get_long_description(),
        long_description_content_type='text/markdown',
        license='Apache License 2.0',
        packages=find_packages(include=['spanner_admin', 'spanner_admin.*']),
        package_data={'spanner_admin': ['config_templates/*.cfg']},
        include_package_data=True,
        python_requires='>=3.8',
        install_requires=install_requires,
        extras_require=EXTRAS_REQUIREMENTS,
        classifiers=[
            'Development Status :: 5 - Production/Stable',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: Apache Software License',
            'Programming Language :: Python :: 3',
            'Topic :: Database',
        ],
        cmdclass={
            'extra_clean': CleanCommand,
            'list_extras': ListExtras,
        },
    )


if __name__ == "__main__":
    do_setup()
