# main.py
import sys

from ledger_gateway.cli.cli import CLI

def main():
    # Same as `ledger-gateway serve`, with an optional config path
    args = ["serve"]
    if len(sys.argv) > 1:
        args = ["--config", sys.argv[1], "serve"]
    sys.exit(CLI().main(args))

if __name__ == "__main__":
    main()
