"""Compilers for the XML documents of the publication archive."""

from .compiler import Compiler
from .container_compiler import ContainerCompiler
from .package_compiler import PackageCompiler

__all__ = ["Compiler", "ContainerCompiler", "PackageCompiler"]
