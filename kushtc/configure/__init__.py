# SPDX-License-Identifier: MIT
"""Toolchain settings loading."""
