"""Allow ``python -m ellu_dl``."""

from .cli import main


main()
