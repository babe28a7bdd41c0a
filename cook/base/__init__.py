# SPDX-License-Identifier: BSD-3-Clause
"""
Command-line entry points for cook.

Each module exposes a main() that parses its flags, builds one request
and runs exactly one phase against the target tree.
"""
