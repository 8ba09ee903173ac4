"""Built-in CLI sub-commands for fetchwrap.

* :mod:`~fetchwrap.commands.request` -- send one HTTP request.
* :mod:`~fetchwrap.commands.config` -- view and modify stored defaults.

``request`` is a plain callback registered directly on the root app;
``config`` is a :class:`typer.Typer` sub-application.
"""
