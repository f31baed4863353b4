"""Allow ``python -m trevnet_installer``."""

from trevnet_installer.cli import main

main()
