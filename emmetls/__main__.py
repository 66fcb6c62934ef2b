"""
Module entry point for the Emmet Language Server.

This file is executed when running: python -m emmetls
"""
from emmetls.main import main

if __name__ == "__main__":
    main()
