# SPDX-License-Identifier: BSD-3-Clause
"""
Build orchestration for embedded Linux kernel and busybox trees.
"""

__version__ = '0.1.0'
