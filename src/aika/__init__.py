# SPDX-License-Identifier: MIT

from aika.cleanup import register_cleanup
from aika.initialize import initialize
from aika.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()
