# SPDX-License-Identifier: MIT

from aika import main

main()
