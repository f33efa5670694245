"""Allow ``python -m tasklist``."""

from tasklist.cli import main

main()
