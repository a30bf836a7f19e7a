from setuptools import find_packages, setup
import os
from glob import glob

package_name = 'baxter_data_recorder'

setup(
    name=package_name,
    version='1.0.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
        (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
    ],
    install_requires=[
        'setuptools',
        'PyYAML',
        'rich',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='Dave Coleman',
    maintainer_email='dave@example.com',
    description='Records Baxter joint states and joint commands to CSV for offline analysis',
    license='BSD',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'recorder_node = baxter_data_recorder.recorder_node:main',
            'record_csv = baxter_data_recorder.record_csv:main',
        ],
    },
)
