# -*- coding: utf-8 -*-
"""Pure text/JSON helpers for the analysis pipeline."""
