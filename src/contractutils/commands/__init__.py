"""
Commands - implementations of the CLI subcommands.

- deploy:   Deploy a compiled contract
- invoke:   call (read) / transact (write) contract functions
- receipt:  Wait for a transaction outcome
- account:  balance, send, wallet new/whoami/ganache/unlock
- mining:   mine start/stop
"""
