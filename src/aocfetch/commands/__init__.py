"""CLI sub-commands for aocfetch.

* :mod:`~aocfetch.commands.fetch` -- fetch one day's input (cache first).
* :mod:`~aocfetch.commands.cache` -- list and locate cached inputs.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``cache``) or a plain callback function
registered directly on the root app (for single commands like ``fetch``).
"""
