#! /usr/bin/env python3
# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""
Development launcher: run yaesutool from source tree with debug helpers.
"""
import typing as ty

try:
    import icecream

    icecream.install()
    icecream.ic.configureOutput(includeContext=True)

except ImportError:  # Graceful fallback if IceCream isn't installed.
    pass

try:
    from typeguard import install_import_hook

    install_import_hook("yaesutool")
    print("WARN! typeguard hook installed")

    ty.TYPE_CHECKING = True

except ImportError as err:
    print(err)


from yaesutool import main

main.main()
