# SPDX-License-Identifier: MIT
"""Core data model: configuration, commands, diagnostics and errors."""
