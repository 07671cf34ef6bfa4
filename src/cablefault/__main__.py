"""Command-line interface."""
from cablefault.main import main

if __name__ == "__main__":
    main()
