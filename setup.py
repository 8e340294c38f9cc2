from setuptools import setup, find_packages

setup(
    name='qstamp',
    version='1.0.0',
    packages=find_packages(include=['qstamp', 'qstamp.*']),
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=[
        'colored==2.2.3',
        'halo==0.0.31',
        'python-dotenv>=1.0.0',
        'rapidfuzz>=3.0.0',
        'webvtt-py>=0.5.1',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points='''
        [console_scripts]
        qstamp=qstamp.__main__:main
    ''',
    author='Juan Sugg',
    author_email='juanpedrosugg@gmail.com',
    license='MIT',
    keywords='captions subtitles webvtt question timestamps chapters',
    description='Timestamps the questions of a video description against its auto captions',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
