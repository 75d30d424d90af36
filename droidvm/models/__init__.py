# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Configuration models."""

from droidvm.models.setup_config import (
    CloudflareSettings,
    DistroSettings,
    PythonSettings,
    SetupConfigModel,
    SSHSettings,
    TailscaleSettings,
    TmuxSettings,
)

__all__ = [
    "CloudflareSettings",
    "DistroSettings",
    "PythonSettings",
    "SetupConfigModel",
    "SSHSettings",
    "TailscaleSettings",
    "TmuxSettings",
]
