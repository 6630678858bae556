# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Stateful map features.

Each feature draws through the MapRenderer port and keeps the handles
of exactly the shapes it created, so removing one feature never touches
another feature's shapes.
"""
