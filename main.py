"""
Entry point for the Axon CLI.

Run with:
    python main.py play --mode classic
    python main.py stats
"""
from axon.cli.main import run

if __name__ == "__main__":
    run()
