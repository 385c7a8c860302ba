# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""
Clone tool for Yaesu FT-60R and VX-2 handheld radios.
"""

__version__ = "0.1.0"
