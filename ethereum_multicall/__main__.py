from ethereum_multicall.cli import main

if __name__ == "__main__":
    main()
