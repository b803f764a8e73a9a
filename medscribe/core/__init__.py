# -*- coding: utf-8 -*-
"""Core models, errors and request dependencies."""
