# setup.py
from setuptools import setup, find_packages

setup(
    name="elisp-bridge",
    version="0.1.0",
    description="Build Emacs Lisp forms in Python and evaluate them in a dedicated Emacs daemon",
    packages=find_packages(include=["elisp_bridge", "elisp_bridge.*"]),
    python_requires=">=3.9",
    install_requires=[
        "yachalk",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
