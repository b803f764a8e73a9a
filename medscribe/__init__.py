# -*- coding: utf-8 -*-
"""medscribe - clinical transcript structuring API."""

__version__ = "1.0.0"
