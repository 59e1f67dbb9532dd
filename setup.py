from setuptools import setup, find_packages

setup(
    name="kbchat",
    version="0.1.0",
    packages=find_packages(include=["kbchat", "kbchat.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.5",
        "langchain-core>=0.3",
        "langchain-aws>=0.2",
        "langchain-google-genai>=2.0",
        "boto3>=1.34",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
    entry_points={
        "console_scripts": [
            "kbchat=kbchat.main:main",
        ],
    },
)
