"""
Node - On-chain interaction layer.

Provides the JSON-RPC client, ABI helpers, transaction utilities and the
receipt waiter for talking to an Ethereum node.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
