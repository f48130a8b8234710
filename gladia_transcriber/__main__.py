"""Package entry point for ``python -m gladia_transcriber``.

WHY: Users run the client as ``python -m gladia_transcriber start URL``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from gladia_transcriber.cli import main

if __name__ == "__main__":
    main()
