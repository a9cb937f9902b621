"""NEPO markup reading.

Public API::

    from nepo.markup import load_program, read_configuration

    tree = load_program("drive_square.xml")
    config = read_configuration(tree)
"""

from ._configuration import read_configuration
from ._reader import load_program, parse_program

__all__ = ["load_program", "parse_program", "read_configuration"]
