# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""droidvm - Turn an Android phone running Termux into a small server."""

__version__ = "1.1.0"
