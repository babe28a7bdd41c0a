# SPDX-License-Identifier: BSD-3-Clause
"""
Library modules behind the cook command-line tools.
"""
