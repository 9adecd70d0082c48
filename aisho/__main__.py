"""
aisho 的入口点，可通过 python -m aisho 运行。
"""

from aisho.cli.commands import app

if __name__ == "__main__":
    app()
