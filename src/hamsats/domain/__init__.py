# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Pure domain layer: geometry, ground tracks, TLE parsing, projections."""
