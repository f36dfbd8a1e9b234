"""
qs - Quick Setup for CMake projects

Generates and incrementally edits CMakeLists.txt files and drives the
cmake/make toolchain from the command line.
"""

__version__ = "0.1.0"
