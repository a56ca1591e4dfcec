from setuptools import setup, find_packages

setup(
    name="serp-crawler",
    version="1.0.0",
    description="HTML/Markdown content cleaning, search result collection and keyword analysis",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "serpcrawler": ["services/prompts/*.txt"],
    },
    install_requires=[
        "beautifulsoup4>=4.10.0",
        "html2text>=2020.1.16",
        "markdown>=3.3",
        "requests>=2.25.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'serpcrawler=serpcrawler.__main__:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
