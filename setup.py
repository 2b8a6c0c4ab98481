from setuptools import setup, find_packages

setup(
    name="govanity",
    version="0.1.0",
    description="Generate static go-import redirect pages for Go vanity import paths hosted on GitHub",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    license="0BSD",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "flask>=3.0.0",
        "mcp>=1.0.0,<2",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "govanity=govanity_package.govanity:main",
            "govanity-mcp=govanity_package.mcp_server:main",
            "govanity-serve=govanity_package.app:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Utilities",
    ],
)
