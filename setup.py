from setuptools import setup, find_packages

setup(
    name="backupbuddy",
    version="0.1.0",
    description="BackupBuddy archives files, encrypts or signs the archive with GPG and uploads it to a storage bucket with a signed HTTP request.",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pyyaml",
                      "httpx",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "backupbuddy=backupbuddy.main:main",
        ],
    },
    python_requires=">=3.8",
)
