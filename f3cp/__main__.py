"""Package entry point for ``python -m f3cp``.

WHY: Lets the tool run without the console script installed, e.g.
``python -m f3cp dump https://host/fedora und:abc123``.

HOW: Delegates straight to the CLI's main().
"""

from f3cp.cli import main

if __name__ == "__main__":
    main()
