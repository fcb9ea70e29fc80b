"""Allow running the updater with ``python -m creamapi_dlc_updater``."""

from creamapi_dlc_updater.main import main

if __name__ == "__main__":
    main()
